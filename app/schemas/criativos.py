from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from app.schemas.offers import OfferSummary


class CriativoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    drive_link: str = Field(..., min_length=1)
    oferta_id: Optional[int] = None
    nicho: Optional[str] = None
    trafego: Optional[str] = None
    idioma: Optional[str] = None


class CriativoUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    drive_link: Optional[str] = Field(None, min_length=1)
    oferta_id: Optional[int] = None
    nicho: Optional[str] = None
    trafego: Optional[str] = None
    idioma: Optional[str] = None


class CriativoOut(BaseModel):
    id: int
    title: str
    drive_link: str
    oferta_id: Optional[int] = None
    nicho: Optional[str] = None
    trafego: Optional[str] = None
    idioma: Optional[str] = None
    created_at: Optional[datetime] = None
    oferta: Optional[OfferSummary] = None

    class Config:
        from_attributes = True
