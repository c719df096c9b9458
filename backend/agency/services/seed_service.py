# Overview: Idempotent master-data seeding (owner names and the material price list).

from __future__ import annotations

import logging
from decimal import Decimal

from ..models import Material, Owner
from .upsert import dialect_insert

logger = logging.getLogger(__name__)

OWNER_NAMES = (
    "AARON",
    "AARUPADAI",
    "AATHI GANAPATHIPURAM",
    "ABINAYA",
    "ABIN AMMANDIVILAI",
    "ALWIN",
    "AKILAN CONTRACTOR",
    "AKILAN RAJAKKAMANGALAM",
    "ALAGU VEL PAMPANVILAI",
    "AK CONSTRUCTIONS–MIDHUN",
    "AMA BUILDERS MOTTOM",
    "AMMAN THUNAI",
    "ANAND CTM",
    "ANAND MANIKANDAN",
    "ANBEY SIVAM",
    "ANBU SWAMY GANPATHIPURAM",
    "A R M HOLLOW BRICKS",
    "APARNA",
    "ARUL SEELE",
    "ASHLIN JOHN",
    "AYYA THUNAI",
    "AYYAPPAN KOTTANAR",
    "AYYAPPAN (PAK) CONTRACTOR",
    "AZHIKAL AUTO",
    "BALA JCB",
    "BALA KURUNTHANCODE",
    "BALA KRISHNAN MONDAIKADU",
    "BASIL",
    "CMN",
    "CHELLATHANGAM",
    "CHENDUR MURUGAN",
    "CHURCH ENGINEER",
    "CHURCH ENGINEER YESUDAS",
    "CSI CHURCH AK",
    "CTM MANIKANDAN",
    "CTM MANIKANDAN DRIVER",
    "DAS MANAVALAKURICHI",
    "DEVA KIRUBAI",
    "DEVENTHIRAN",
    "DHARSHINI",
    "DHANUSH",
    "DHINESH ELLUVILAI",
    "DHINESH EATHAMOZHI",
    "DURAIRAJ AK",
    "DX",
    "EDWIN",
    "ESWARI",
    "GOBI",
    "GOOD SHEPHERD",
    "HOLLOW BRICKS-THINGAL NAGER",
    "HARSHIKA",
    "JAGAN J S",
    "JAGATHISH VEL DRIVER",
    "JAWAN AYYAPPAN",
    "JCB OPERTOR THALAKULAM",
    "JELIN",
    "JINA DEV",
    "JESUS",
    "JOSE KANNAKURICHI",
    "JOSE",
    "K KAMALAM",
    "KMS",
    "KADUVA MOOTHY",
    "KARAVILAI",
    "KALLU KATTAI PLOT",
    "KANNAN SREE KRISHNAPURAM",
    "KANNAN VELLAMODI",
    "KANTHAN KARUNAI",
    "KARUNYA",
    "KRISHNA KUMAR",
    "KUMAR SUDALAI",
    "KUMAR ANDI",
    "LAKSHMI PERUMAL",
    "LEON-KADIYAPATTANIAM",
    "MTS – ANISH",
    "MAGARA JOTHI",
    "MAHALAXMI",
    "MAHENDRAN",
    "MANIKANDA RAJA",
    "MANO SARAL",
    "MANOHARAN CONTRACTOR",
    "MANOHARAN CONTRACTOR JPR",
    "MANON MANI",
    "MARUTHI EATHAMOZHI",
    "MEEGA",
    "MICHEL THALAVAIPURAM",
    "M P B",
    "MOGAN AK",
    "MUTTOM AYYAPPAN",
    "MUTHU AK",
    "N KUMAR",
    "NANTHISH AZHAGANVILAI",
    "NARAYANAN SWANY",
    "NIRMAL CONTRACTOR",
    "NISANTH CONTRACTOR",
    "NITHANYA",
    "NELSON AMMANDIVILAI",
    "OLIVER SPENCER",
    "PABITHA",
    "PANDI",
    "PATHMANABAN",
    "PAPPY XL",
    "PAPPY SELVAN",
    "PARAMESHWARAN",
    "PILLAIYAR VILAI",
    "PON SURESH",
    "PRASANTH CONTRACTOR (A.V)",
    "POOVIYUR-MURUGAN",
    "PRINCE-AC",
    "PUNITHA ANTONIYAR",
    "R K",
    "RKM",
    "R S R",
    "R S SUTHIKA",
    "RAGAVAN CONTRACTOR",
    "RAGAVAN ESANTHANGU",
    "RAGAVAN-AK",
    "RAJA KONAM PLAT",
    "RAJAKUMAR PASTOR",
    "RAJESH WARAN",
    "RAJESH J",
    "RAMESH PUCHIKADU",
    "REST HOUSE",
    "ROBINSON CONTRACTOR",
    "RPN-SUTHAGAR",
    "S D AGENCY",
    "S S HARISH CONSTRUCTION",
    "SABAPATHY",
    "SAGALA PUNITHARGAL",
    "SAI RITHIK",
    "SAHAYA MATHA",
    "SAHAYA RAJ",
    "SANJAYA XL",
    "SANKAR GRKS",
    "SANKAR SURA AK",
    "SANTHOSH",
    "SARASWATHY",
    "SARAVANA BAVA",
    "SENBAHA",
    "SENTHIL ROSE AK",
    "SENTHIL CONTRACTOR",
    "SHABI HOTAL",
    "SHAJU",
    "SHIVANI",
    "SIVANTHAMON AUTO DRIVER",
    "SIVA LINGAM",
    "SIVA PARAMAN VILAI",
    "SREE AYYAPPAN",
    "SREE KRISHNA",
    "SREE MANIKANDAN",
    "SREE STUDIO",
    "SREE YANA",
    "SUGAN PARUTHIVILAI",
    "SUJAY",
    "SUJIN",
    "SUJITH DRIVER",
    "SUNIL MMS",
    "SUNDER MILK",
    "SURESH K.KURICHI",
    "SUSILA PILLAITHOUPPU (RED SAND)",
    "SUTHAN DRIVER",
    "SIVA KRISHNAN",
    "THANGAM CONTRACTOR",
    "THANGAPPAN",
    "THIYAGARAJAN",
    "UGEN MOTTOM",
    "V T R",
    "VARSHA",
    "VARSHA VELLAI",
    "VETHA MANI",
    "VISVA JOTHI",
    "VINU-JAYAM",
    "V K - INTERLOCK",
    "VR TEMPO",
    "YESUDAS",
    "GANAPATHIPURAM BAGS PB-3/4",
    "SIVAN TIPPER-50&50-PPC5",
    "JAYA RAJAN",
    "MOGAN",
    "SUBIN-AK-TEMPO RENT",
    "ARUL ADV PUTHUR",
)

# (name, rate_per_unit, unit)
MATERIAL_PRICE_LIST = (
    ("M-Sand 1", Decimal("61"), "unit"),
    ("M-Sand 2", Decimal("63"), "unit"),
    ("P-Sand", Decimal("68"), "unit"),
    ("Jalli 1/4", Decimal("53"), "unit"),
    ("Jalli 1/2", Decimal("54"), "unit"),
    ("Jalli 3/4", Decimal("53"), "unit"),
    ("Jalli 1 1/2", Decimal("53"), "unit"),
    ("Dust", Decimal("56"), "unit"),
    ("Bed Mix", Decimal("53"), "unit"),
    ("Brick 1 - Pressing", Decimal("9"), "unit"),
    ("Brick 2 - Chutta Kal", Decimal("9.25"), "unit"),
    ("Cement", Decimal("290"), "bag"),
)


def seed_master_data(session, *, owners=OWNER_NAMES, materials=MATERIAL_PRICE_LIST) -> tuple[int, int]:
    """
    Insert missing owners and upsert material rates, in one transaction.

    Existing owners are left untouched; existing materials take the listed
    rate and unit. Returns (owner_count, material_count) processed.
    """
    try:
        for name in owners:
            stmt = dialect_insert(session, Owner).values(name=name, is_active=True)
            session.execute(stmt.on_conflict_do_nothing(index_elements=["name"]))

        for name, rate, unit in materials:
            stmt = dialect_insert(session, Material).values(
                name=name, rate_per_unit=rate, unit=unit, is_active=True
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["name"],
                set_={"rate_per_unit": stmt.excluded.rate_per_unit, "unit": stmt.excluded.unit},
            )
            session.execute(stmt)

        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Master data seed failed")
        raise

    logger.info("Seeded %s owners and %s materials", len(owners), len(materials))
    return len(owners), len(materials)
