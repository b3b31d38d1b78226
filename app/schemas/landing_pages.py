from pydantic import BaseModel, Field
from datetime import datetime
from typing import Annotated, Optional, Union, Literal

from app.models.landing_page import LandingPage, OfferLink, CreativeLink, Association


class OfferAssociationIn(BaseModel):
    type: Literal["oferta"]
    oferta_id: int

    def to_link(self) -> OfferLink:
        return OfferLink(self.oferta_id)


class CreativeAssociationIn(BaseModel):
    type: Literal["criativo"]
    criativo_id: int

    def to_link(self) -> CreativeLink:
        return CreativeLink(self.criativo_id)


AssociationIn = Annotated[Union[OfferAssociationIn, CreativeAssociationIn], Field(discriminator="type")]


def to_association(value: Optional[AssociationIn]) -> Association:
    return value.to_link() if value is not None else None


class LandingPageCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    page_url: str = Field(..., min_length=1)
    association: Optional[AssociationIn] = None


class LandingPageUpdate(BaseModel):
    """Omitted fields are left alone; an explicit null association clears it."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    page_url: Optional[str] = Field(None, min_length=1)
    association: Optional[AssociationIn] = None


class LandingPageOut(BaseModel):
    id: int
    title: str
    page_url: str
    association_type: Optional[str] = None
    oferta_id: Optional[int] = None
    criativo_id: Optional[int] = None
    oferta_title: Optional[str] = None
    criativo_title: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, page: LandingPage) -> "LandingPageOut":
        """Raises AssociationIntegrityError when the stored row is inconsistent."""
        link = page.association
        return cls(
            id=page.id,
            title=page.title,
            page_url=page.page_url,
            association_type=link.type.value if link is not None else None,
            oferta_id=link.oferta_id if isinstance(link, OfferLink) else None,
            criativo_id=link.criativo_id if isinstance(link, CreativeLink) else None,
            oferta_title=page.oferta.title if isinstance(link, OfferLink) and page.oferta else None,
            criativo_title=page.criativo.title if isinstance(link, CreativeLink) and page.criativo else None,
            created_at=page.created_at,
        )
