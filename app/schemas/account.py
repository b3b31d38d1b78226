from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from app.schemas.subscription import SubscriptionOut


class ProfileOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    subscription: SubscriptionOut


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=32)


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_new_password: str
