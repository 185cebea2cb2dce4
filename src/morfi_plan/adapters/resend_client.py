"""Resend transactional email adapter."""

import asyncio
from dataclasses import dataclass
from typing import Protocol

import resend
from resend.exceptions import ResendError


class EmailProviderError(Exception):
    """Raised when the provider rejects a message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class EmailMessage:
    """A message ready to hand to the provider."""

    sender: str
    to: list[str]
    subject: str
    html: str


class EmailClient(Protocol):
    """Interface for sending transactional email."""

    async def send(self, message: EmailMessage) -> str:
        """Send a message and return the provider's id for it."""


@dataclass
class ResendEmailClient(EmailClient):
    """Email client built on the Resend SDK."""

    api_key: str

    @classmethod
    def create(cls, api_key: str) -> "ResendEmailClient":
        """Create a client and register the key with the SDK."""
        resend.api_key = api_key
        return cls(api_key=api_key)

    async def send(self, message: EmailMessage) -> str:
        """Send through ``resend.Emails.send`` in a worker thread."""
        params = {
            "from": message.sender,
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
        }
        resend.api_key = self.api_key
        try:
            response = await asyncio.to_thread(resend.Emails.send, params)
        except ResendError as exc:
            raise EmailProviderError(getattr(exc, "message", str(exc))) from exc
        if isinstance(response, dict):
            return str(response.get("id", ""))
        return str(getattr(response, "id", ""))
