import hashlib
import logging

from ...application.ports.otp_sender import OTPSender


class LoggingOTPSender(OTPSender):
    """Development sender: records that a code was issued without delivering it."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def send(self, phone: str, code: str) -> None:
        phone_hash = hashlib.sha256(phone.encode()).hexdigest()[:12]
        self._logger.info(f"OTP issued for phone {phone_hash} (SMS delivery not configured)")
