# Overview: Pytest coverage for printable bill rendering.

import os
from datetime import datetime
from decimal import Decimal

import pytest

from agency.services.document_service import bill_pdf_filename, generate_bill_document, mattam_display


@pytest.mark.parametrize(
    "item, expected",
    [
        ({"material_name": "Hollow Bricks", "unit": "unit", "quantity": Decimal("400.4")}, "400"),
        ({"material_name": "Cement", "unit": "bag", "quantity": 12, "mattam": "3"}, "12"),
        ({"material_name": "Gravel", "unit": "NO", "quantity": Decimal("2.6")}, "3"),
        ({"material_name": "M-Sand 1", "grill_mattam": True}, "Grill Mattam"),
        ({"material_name": "M-Sand 1", "grill_mattam": True, "mattam": "2"}, "Grill Mattam + 2"),
        ({"material_name": "M-Sand 1", "mattam_checked": True}, "Mattam"),
        ({"material_name": "M-Sand 1", "mattam_checked": True, "mattam": "1"}, "Mattam + 1"),
        ({"material_name": "M-Sand 1", "mattam": ""}, "Mattam"),
        ({"material_name": "M-Sand 1", "mattam": "0", "quantity": Decimal("7")}, "7"),
        ({"material_name": "M-Sand 1", "mattam": "4"}, "Mattam + 4"),
        ({"material_name": "M-Sand 1", "mattam": "half load"}, "half load"),
    ],
)
def test_mattam_display(item, expected):
    assert mattam_display(item) == expected


def _bill_data(**overrides):
    data = {
        "bill_id": 12,
        "daily_bill_no": 3,
        "bill_timestamp": datetime(2026, 10, 1, 4, 0),
        "owner_name": "AARON",
        "vehicle_number": "TN01",
        "items": [
            {
                "material_name": "M-Sand 1",
                "unit": "unit",
                "quantity": Decimal("10"),
                "rate_at_sale": Decimal("50"),
                "total_cost": Decimal("500"),
                "mattam": "2",
                "grill_mattam": False,
                "mattam_checked": False,
            }
        ],
        "total_amount": Decimal("700"),
        "include_pass": True,
        "pass_amount": Decimal("200"),
    }
    data.update(overrides)
    return data


def test_filename():
    assert bill_pdf_filename(12, 3) == "bill_12_3.pdf"


def test_generate_writes_pdf(tmp_path):
    outcome = generate_bill_document(_bill_data(), str(tmp_path), tz_name="Asia/Kolkata")

    assert outcome.ok
    assert outcome.filename == "bill_12_3.pdf"
    with open(os.path.join(tmp_path, outcome.filename), "rb") as fh:
        assert fh.read(4) == b"%PDF"


def test_generate_skipped_without_dir():
    outcome = generate_bill_document(_bill_data(), None)
    assert outcome.status == "skipped"
    assert outcome.to_dict() == {"status": "skipped", "filename": None, "error": None}


def test_generate_failure_is_reported(tmp_path):
    broken = _bill_data()
    del broken["bill_id"]
    outcome = generate_bill_document(broken, str(tmp_path))
    assert outcome.status == "failed"
    assert outcome.filename is None
