"""
Landing pages and their association to an offer or a creative.

The association is a tagged union: OfferLink | CreativeLink | None.
The two foreign-key columns are written only through ``LandingPage.association``,
so the column matching ``association_type`` is set and the other is null.
"""
import enum
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class AssociationType(str, enum.Enum):
    OFERTA = "oferta"
    CRIATIVO = "criativo"


@dataclass(frozen=True)
class OfferLink:
    oferta_id: int

    @property
    def type(self) -> AssociationType:
        return AssociationType.OFERTA


@dataclass(frozen=True)
class CreativeLink:
    criativo_id: int

    @property
    def type(self) -> AssociationType:
        return AssociationType.CRIATIVO


Association = Optional[Union[OfferLink, CreativeLink]]


class AssociationIntegrityError(ValueError):
    """Stored columns disagree with the association discriminant."""


class LandingPage(Base):
    __tablename__ = "landing_pages"
    __table_args__ = (
        CheckConstraint(
            "(association_type IS NULL AND oferta_id IS NULL AND criativo_id IS NULL)"
            " OR (association_type = 'oferta' AND oferta_id IS NOT NULL AND criativo_id IS NULL)"
            " OR (association_type = 'criativo' AND criativo_id IS NOT NULL AND oferta_id IS NULL)",
            name="ck_landing_pages_association",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    page_url = Column(Text, nullable=False)
    association_type = Column(
        Enum(
            AssociationType,
            name="association_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )
    oferta_id = Column(Integer, ForeignKey("contents.id", ondelete="CASCADE"), nullable=True, index=True)
    criativo_id = Column(Integer, ForeignKey("criativos.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    oferta = relationship("Offer")
    criativo = relationship("Criativo")

    @property
    def association(self) -> Association:
        return read_association(self.association_type, self.oferta_id, self.criativo_id)

    @association.setter
    def association(self, value: Association) -> None:
        if value is None:
            self.association_type = None
            self.oferta_id = None
            self.criativo_id = None
        elif isinstance(value, OfferLink):
            self.association_type = AssociationType.OFERTA
            self.oferta_id = value.oferta_id
            self.criativo_id = None
        elif isinstance(value, CreativeLink):
            self.association_type = AssociationType.CRIATIVO
            self.oferta_id = None
            self.criativo_id = value.criativo_id
        else:
            raise TypeError(f"Unsupported association: {value!r}")


def read_association(
    association_type: Optional[AssociationType],
    oferta_id: Optional[int],
    criativo_id: Optional[int],
) -> Association:
    """Decode the stored columns, raising AssociationIntegrityError on disagreement."""
    if association_type is None:
        if oferta_id is not None or criativo_id is not None:
            raise AssociationIntegrityError("Unassociated landing page has a foreign key set")
        return None
    if association_type == AssociationType.OFERTA:
        if oferta_id is None or criativo_id is not None:
            raise AssociationIntegrityError("Offer association requires only oferta_id")
        return OfferLink(oferta_id)
    if association_type == AssociationType.CRIATIVO:
        if criativo_id is None or oferta_id is not None:
            raise AssociationIntegrityError("Creative association requires only criativo_id")
        return CreativeLink(criativo_id)
    raise AssociationIntegrityError(f"Unknown association type: {association_type!r}")
