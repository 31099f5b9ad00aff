"""Notifier that only writes the e-mail to the log (no notify endpoint configured)."""

from __future__ import annotations

import logging

from shopcore.application.notifications import Notifier, OrderEmail

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):

    async def send(self, email: OrderEmail) -> None:
        logger.info(
            "Order email (%s) for %s to %s: %s",
            email.type.value,
            email.order_id,
            email.email or "<no address>",
            email.status or "placed",
        )
