import random
import re
import string
import time
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

OTP_EXPIRY_MINUTES = 5

_INDIAN_MOBILE_RE = re.compile(r"[6-9]\d{9}")
_REFERENCE_ALPHABET = string.digits + string.ascii_lowercase


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# =========================
# Phone numbers
# =========================
def normalize_indian_phone(phone) -> Optional[str]:
    """Return the canonical ``+91XXXXXXXXXX`` form of an Indian mobile number.

    Accepts ``+91``/``91``/``0`` prefixed or bare 10-digit numbers with any
    punctuation. Returns None for anything that is not a valid mobile number.
    """
    if not phone or not isinstance(phone, str):
        return None

    cleaned = re.sub(r"[^\d+]", "", phone)

    if cleaned.startswith("+91") and len(cleaned) == 13:
        cleaned = cleaned[3:]
    elif cleaned.startswith("91") and len(cleaned) == 12:
        cleaned = cleaned[2:]
    elif cleaned.startswith("0") and len(cleaned) == 11:
        cleaned = cleaned[1:]

    if _INDIAN_MOBILE_RE.fullmatch(cleaned):
        return f"+91{cleaned}"
    return None


# =========================
# OTP Generation
# =========================
def generate_otp() -> str:
    """Generate a 6-digit OTP (not cryptographically strong)."""
    return str(random.randint(100000, 999999))


def issue_otp(now: Optional[datetime] = None) -> Tuple[str, datetime]:
    """Return a fresh ``(code, expiry)`` pair; the caller persists it."""
    issued_at = now or utcnow()
    return generate_otp(), issued_at + timedelta(minutes=OTP_EXPIRY_MINUTES)


# =========================
# Reference ids
# =========================
def generate_reference_id(prefix: str) -> str:
    """Ids like ``GR-1718000000000-k3j9x0a2b`` used for reports, entities and alerts."""
    suffix = "".join(random.choices(_REFERENCE_ALPHABET, k=9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"
