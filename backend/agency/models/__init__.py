from .catalog import Material, Owner, Vehicle
from .billing import Bill, Transaction, OwnerPass, DailyBillSequence
from .payments import OwnerPayment

__all__ = [
    'Material', 'Owner', 'Vehicle',
    'Bill', 'Transaction', 'OwnerPass', 'DailyBillSequence',
    'OwnerPayment',
]
