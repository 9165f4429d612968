"""Notification sink that records caller messages as structured log events."""

from procurement.config import get_logger
from procurement.core.interfaces import INotificationSink, NotificationLevel

logger = get_logger("procurement.notifications")


class LogNotificationSink(INotificationSink):
    """Emits one structlog event per notification."""

    async def notify(self, actor_id: str, level: NotificationLevel, message: str) -> None:
        if level == NotificationLevel.FAILURE:
            logger.warning("notification", actor_id=actor_id, level=level.value, message=message)
        else:
            logger.info("notification", actor_id=actor_id, level=level.value, message=message)
