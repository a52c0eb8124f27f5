"""Mail Delivery — development adapter for the Mailer protocol.

Invariants:
    - The rendered message is never logged: it carries the user's secret link
    - Delivered messages are retained in memory (bounded) so local setups and tests
      can inspect what would have been sent

Design Decisions:
    - Real SMTP/API delivery is a deployment concern; anything satisfying
      core.repository_protocols.Mailer can be installed on app.state.mailer
"""

import logging
from collections import deque
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutgoingMessage:
    sender: str
    recipient: str
    message: str


class LogMailer:
    """Records deliveries in memory and logs their metadata."""

    def __init__(self, keep: int = 100):
        self.outbox: deque[OutgoingMessage] = deque(maxlen=keep)

    async def send(self, sender: str, recipient: str, message: str) -> None:
        self.outbox.append(OutgoingMessage(sender, recipient, message))
        logger.info("Credentials email queued", extra={"recipient": recipient})
