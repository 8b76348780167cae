import logging
from typing import Optional

from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from ...config import settings
from ...application.ports.otp_sender import OTPSender

logger = logging.getLogger(__name__)

OTP_MESSAGE = "Your Cyber Portal verification code is {code}. It expires in 5 minutes."


class TwilioSMSSender(OTPSender):
    def __init__(self, client: Optional[Client] = None, from_number: Optional[str] = None):
        self.client = client or Client(
            settings.TWILIO_ACCOUNT_SID,
            settings.TWILIO_AUTH_TOKEN,
            http_client=TwilioHttpClient(timeout=15, max_retries=3),
        )
        self.from_number = from_number or settings.TWILIO_PHONE_NUMBER

    def send(self, phone: str, code: str) -> None:
        if not self.from_number:
            raise RuntimeError("Twilio sender number not configured")
        message = self.client.messages.create(
            to=phone,
            from_=self.from_number,
            body=OTP_MESSAGE.format(code=code),
        )
        logger.info(f"OTP SMS queued: {message.sid}")
