# Database models
from .base import Base
from .user import User, UserRole
from .offer import Offer
from .criativo import Criativo
from .landing_page import (
    LandingPage,
    AssociationType,
    OfferLink,
    CreativeLink,
    Association,
    AssociationIntegrityError,
)
from .activity import UserLogin, ContentAccess

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Offer",
    "Criativo",
    "LandingPage",
    "AssociationType",
    "OfferLink",
    "CreativeLink",
    "Association",
    "AssociationIntegrityError",
    "UserLogin",
    "ContentAccess",
]
