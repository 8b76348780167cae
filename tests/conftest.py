import os

# Must be set before cyberportal.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_PER_MINUTE"] = "10000"
os.environ["EXPOSE_OTP_IN_RESPONSE"] = "true"

from datetime import datetime, timedelta
from typing import Any, List, Optional, Sequence, Tuple

import pytest
from sqlmodel import Session

from cyberportal.database import build_engine, create_db_and_tables
from cyberportal.utils import utcnow


def make_user(users, n=1, role="USER"):
    return users.create(
        full_name=f"Citizen {n}",
        national_id=f"10000000000{n}",
        phone=f"+91987654321{n}",
        email=f"citizen{n}@example.com",
        address="Vijay Nagar, Indore",
        role=role,
        otp="123456",
        otp_expiry=utcnow() + timedelta(minutes=5),
    )


class FixedClock:
    """Callable clock tests can move forward by hand."""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2024, 5, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now


class RecordingOTPSender:
    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    def send(self, phone: str, code: str) -> None:
        self.sent.append((phone, code))


class FakeAIWorker:
    """Returns canned replies and remembers every invocation."""

    def __init__(self, reply: Any = None, error: Optional[Exception] = None):
        self.reply = reply if reply is not None else {"response": "ok"}
        self.error = error
        self.calls: List[Tuple[str, Any, Tuple[str, ...], bool]] = []

    def invoke(self, script: str, payload: Any = None, args: Sequence[str] = (), allow_text: bool = False) -> Any:
        self.calls.append((script, payload, tuple(args), allow_text))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    create_db_and_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def clock():
    return FixedClock()
