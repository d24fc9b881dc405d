from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from loguru import logger
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from src.config import Settings


@dataclass
class SendResult:
    ok: bool
    sid: Optional[str] = None
    error_code: Optional[int] = None
    error: Optional[str] = None


class TwilioSender:
    """Send content-template messages through Twilio.

    Without credentials the sender runs in dry-run mode: messages are only
    logged and reported as sent.
    """

    def __init__(self, settings: Settings, client: Optional[Client] = None):
        self.from_number = settings.twilio_from_number
        self.channel_prefix = settings.twilio_channel_prefix
        self.client = client
        self.dry_run = False

        if self.client is None:
            if self.is_configured(settings):
                self.client = Client(settings.twilio_account_sid, settings.twilio_auth_token)
                logger.info("Twilio client initialized")
            else:
                logger.warning("Twilio credentials not configured, running in dry-run mode")
                self.dry_run = True

    @classmethod
    def is_configured(cls, settings: Settings) -> bool:
        return bool(
            settings.twilio_account_sid
            and settings.twilio_auth_token
            and settings.twilio_from_number
        )

    def _address(self, phone: str) -> str:
        return f"{self.channel_prefix}{phone}"

    def send_template(
        self, to: str, template_id: str, variables: Dict[str, str]
    ) -> SendResult:
        """Send one templated message.

        Args:
            to: Normalized phone number ("+972...").
            template_id: Content template SID.
            variables: Positional content variables ({"1": ..., "2": ...}).

        Returns:
            SendResult; provider errors are reported, never raised.
        """
        if self.dry_run:
            logger.info(f"[DRY RUN] template {template_id} to {to}: {variables}")
            return SendResult(
                ok=True, sid=f"DRY_RUN_{datetime.now(timezone.utc).isoformat()}"
            )

        try:
            message = self.client.messages.create(
                from_=self._address(self.from_number),
                to=self._address(to),
                content_sid=template_id,
                content_variables=json.dumps(variables, ensure_ascii=False),
            )
        except TwilioRestException as e:
            logger.error(f"Twilio error sending to {to}: code={e.code} status={e.status} - {e.msg}")
            return SendResult(ok=False, error_code=e.code, error=str(e.msg))

        logger.info(f"Message sent to {to}: SID={message.sid}, status={message.status}")
        return SendResult(ok=True, sid=message.sid)
