from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional


class SubscriptionCounts(BaseModel):
    total_users: int
    active: int
    expired: int
    paused: int
    no_subscription: int


class UserLoginOut(BaseModel):
    user_id: int
    name: str
    email: str
    last_login: datetime
    status: str
    status_label: str


class ContentAccessOut(BaseModel):
    content_id: int
    title: str
    thumbnail: Optional[str] = None
    access_count: int
    last_accessed: datetime


class DashboardOut(BaseModel):
    stats: SubscriptionCounts
    user_logins: List[UserLoginOut]
    content_access: List[ContentAccessOut]
