from typing import Protocol


class OTPSender(Protocol):
    def send(self, phone: str, code: str) -> None:
        ...
