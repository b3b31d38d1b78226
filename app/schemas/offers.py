from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List


class OfferSummary(BaseModel):
    id: int
    title: str
    thumbnail: Optional[str] = None

    class Config:
        from_attributes = True


class OfferOut(BaseModel):
    id: int
    title: str
    thumbnail: str
    drive_link: str
    tipo: Optional[str] = None
    estrutura: Optional[str] = None
    idioma: Optional[str] = None
    nicho: Optional[str] = None
    trafego: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OfferCriativoOut(BaseModel):
    id: int
    title: str
    drive_link: str
    nicho: Optional[str] = None
    trafego: Optional[str] = None
    idioma: Optional[str] = None

    class Config:
        from_attributes = True


class OfferLandingPageOut(BaseModel):
    id: int
    title: str
    page_url: str

    class Config:
        from_attributes = True


class OfferDetailOut(OfferOut):
    criativos: List[OfferCriativoOut] = []
    landing_pages: List[OfferLandingPageOut] = []


class OfferFilterOptions(BaseModel):
    tipo: List[str] = []
    estrutura: List[str] = []
    idioma: List[str] = []
    nicho: List[str] = []
    trafego: List[str] = []
