import re
from datetime import datetime, timedelta, timezone

import pytest

from cyberportal.utils import generate_otp, generate_reference_id, issue_otp, normalize_indian_phone, to_naive_utc


@pytest.mark.parametrize("raw", [
    "9876543210",
    "+919876543210",
    "919876543210",
    "09876543210",
    "+91 98765-43210",
    "(0) 98765 43210",
])
def test_prefixed_forms_normalize_to_same_number(raw):
    assert normalize_indian_phone(raw) == "+919876543210"


@pytest.mark.parametrize("raw", [
    "",
    "5876543210",        # mobile numbers start with 6-9
    "987654321",         # too short
    "98765432101",       # too long, no 0 prefix
    "+929876543210",     # other country code
    "phone",
    None,
    9876543210,
])
def test_invalid_numbers_return_none(raw):
    assert normalize_indian_phone(raw) is None


def test_generate_otp_is_six_digits():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 6 and code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_issue_otp_expires_five_minutes_later():
    now = datetime(2024, 1, 1, 10, 0, 0)
    code, expiry = issue_otp(now)
    assert len(code) == 6
    assert expiry - now == timedelta(minutes=5)


def test_reference_id_shape():
    ref = generate_reference_id("GR")
    assert re.fullmatch(r"GR-\d{13}-[0-9a-z]{9}", ref)
    assert generate_reference_id("GR") != ref


def test_to_naive_utc():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert to_naive_utc(datetime(2024, 6, 1, 5, 30, tzinfo=ist)) == datetime(2024, 6, 1, 0, 0)
    naive = datetime(2024, 6, 1, 9, 0)
    assert to_naive_utc(naive) is naive
    assert to_naive_utc(None) is None
