# workhub/schemas/notification.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

NotificationType = Literal["team", "project", "task", "meeting", "issue", "chat", "system"]
NotificationAction = Literal["created", "updated", "deleted", "assigned", "commented", "mentioned", "completed"]


class NotificationEvent(BaseModel):
    """What happened; the engine decides who hears about it."""
    type: NotificationType
    action: Optional[NotificationAction] = None
    title: str
    message: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    action_url: Optional[str] = None


class NotificationPayload(NotificationEvent):
    user_id: Optional[int] = None
    user_ids: Optional[List[int]] = None

    def recipients(self) -> List[int]:
        if self.user_ids:
            return list(dict.fromkeys(self.user_ids))
        return [self.user_id] if self.user_id is not None else []


class Notification(BaseModel):
    id: int
    user_id: int
    type: str
    action: Optional[str] = None
    title: str
    message: str
    read: bool
    read_at: Optional[datetime] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    action_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCount(BaseModel):
    unread: int
