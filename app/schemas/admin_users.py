from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

from app.schemas.subscription import SubscriptionOut


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=32)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=32)


class ExtendRequest(BaseModel):
    months: int = Field(..., ge=1, le=24)


class AdminUserOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    previous_expires_at: Optional[datetime] = None
    paused: bool
    has_valid_setup_token: bool
    has_password: bool
    subscription: SubscriptionOut


class UserCreatedOut(BaseModel):
    user: AdminUserOut
    email_sent: bool


class SetupEmailOut(BaseModel):
    email_sent: bool
    setup_expires_at: datetime
    replaced_previous: bool
