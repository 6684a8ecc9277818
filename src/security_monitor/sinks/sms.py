"""Text message alerts through the Twilio REST API."""

import logging
import os
from typing import Optional

import httpx

from ..errors import ConfigurationIncomplete
from ..models import Finding
from .base import AlertSink

logger = logging.getLogger(__name__)

TWILIO_API_URL = "https://api.twilio.com/2010-04-01"

TWILIO_ENV_VARS = ("TWILIO_SID", "TWILIO_TOKEN", "TWILIO_FROM", "TWILIO_TO")


def sms_body(finding: Finding) -> str:
    return (
        f"Security Alert: [{finding.severity.value.upper()}] {finding.category} "
        f"detected in {finding.file_name}. {finding.message}"
    )


class SmsSink(AlertSink):
    """Sends one SMS per finding.

    Credentials are passed explicitly or read from the environment with
    from_env(). The base URL can be overridden for testing.
    """

    name = "sms"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        to_number: str,
        base_url: str = TWILIO_API_URL,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.to_number = to_number
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "SmsSink":
        """Build a sink from TWILIO_* variables.

        Raises:
            ConfigurationIncomplete: If any variable is missing or empty.
        """
        env = os.environ if environ is None else environ
        missing = [name for name in TWILIO_ENV_VARS if not env.get(name)]
        if missing:
            raise ConfigurationIncomplete(
                f"SMS configuration incomplete (missing {', '.join(missing)}). Text alerts disabled."
            )
        return cls(
            account_sid=env["TWILIO_SID"],
            auth_token=env["TWILIO_TOKEN"],
            from_number=env["TWILIO_FROM"],
            to_number=env["TWILIO_TO"],
        )

    def send(self, finding: Finding) -> None:
        """Post the message.

        Raises:
            httpx.HTTPError: If the request fails or Twilio rejects it.
        """
        url = f"/Accounts/{self.account_sid}/Messages.json"
        data = {
            "From": self.from_number,
            "To": self.to_number,
            "Body": sms_body(finding),
        }
        with httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            auth=(self.account_sid, self.auth_token),
            transport=self._transport,
        ) as client:
            response = client.post(url, data=data)
            response.raise_for_status()
        logger.info(f"SMS alert sent for {finding.category} in {finding.file_name}")
