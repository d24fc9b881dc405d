from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable

from loguru import logger

from src.config import Settings
from src.models import NotificationType, ResolvedMember
from src.notifications.phone import normalize_phone
from src.notifications.twilio import TwilioSender


@dataclass
class DispatchResult:
    attempted: int = 0
    sent: int = 0
    failed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"attempted": self.attempted, "sent": self.sent, "failed": self.failed}


class NotificationDispatcher:
    """Fans one templated message out to a list of members, one at a time."""

    def __init__(self, settings: Settings, sender: TwilioSender, sleep: Callable[[float], None] = time.sleep):
        self.settings = settings
        self.sender = sender
        self._sleep = sleep

    def is_ready(self, notification_type: NotificationType, template_id: str) -> bool:
        """Whether a fan-out would actually try to send.

        Callers leave their "sent" flags untouched when this is False, so the
        pending notices go out once the configuration is fixed.
        """
        if not self.settings.notification_enabled:
            logger.info(f"Notifications are disabled, leaving {notification_type.value} pending")
            return False
        if not template_id:
            logger.error(f"No template configured for {notification_type.value}, leaving it pending")
            return False
        return True

    def fan_out(
        self,
        notification_type: NotificationType,
        template_id: str,
        recipients: Iterable[ResolvedMember],
        build_variables: Callable[[ResolvedMember], Dict[str, str]],
    ) -> DispatchResult:
        """Send the template to each recipient.

        A failure for one recipient is logged and counted; the remaining
        recipients are still attempted.

        Args:
            notification_type: What is being sent, for logging.
            template_id: Content template SID.
            recipients: Resolved members to message.
            build_variables: Builds the content variables for one member.

        Returns:
            DispatchResult with attempted/sent/failed counts.
        """
        result = DispatchResult()

        if not self.is_ready(notification_type, template_id):
            return result

        for member in recipients:
            phone = normalize_phone(member.phone, self.settings.country_code)
            if phone is None:
                logger.warning(f"Skipping {member.user_id}: unusable phone {member.phone!r}")
                continue

            if result.attempted and self.settings.send_delay_seconds > 0:
                self._sleep(self.settings.send_delay_seconds)

            result.attempted += 1
            try:
                outcome = self.sender.send_template(phone, template_id, build_variables(member))
            except Exception as e:
                logger.error(f"{notification_type.value}: sending to {member.user_id} failed: {e}")
                result.failed += 1
                continue

            if outcome.ok:
                result.sent += 1
            else:
                logger.error(
                    f"{notification_type.value}: delivery to {member.user_id} failed "
                    f"(code={outcome.error_code}): {outcome.error}"
                )
                result.failed += 1

        logger.info(
            f"{notification_type.value}: sent {result.sent}/{result.attempted}, "
            f"failed {result.failed}"
        )
        return result
