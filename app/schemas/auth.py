from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Schema for user login"""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Schema for token response"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    """Schema for refresh token request"""
    refresh_token: str


class SetupLinkInfo(BaseModel):
    """Returned when a setup link checks out"""
    email: str
    name: str


class PasswordSetupRequest(BaseModel):
    """Schema for completing a password setup link"""
    token: str = Field(..., min_length=1)
    email: EmailStr
    password: str
    confirm_password: str
