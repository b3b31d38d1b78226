"""
Landing page catalogue.

A page is associated with an offer, a creative, or nothing. Requests carry
the association as a tagged object (``{"type": "oferta", "oferta_id": 3}``)
and responses are decoded from the stored columns, so a row that breaks the
association invariant surfaces as an AssociationIntegrityError.
"""
import logging
from typing import List, Optional, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.models.criativo import Criativo
from app.models.landing_page import LandingPage, OfferLink, CreativeLink, Association
from app.models.offer import Offer
from app.models.user import User, UserRole
from app.schemas.landing_pages import (
    LandingPageCreate,
    LandingPageUpdate,
    LandingPageOut,
    to_association,
)
from app.auth.dependencies import require_role, require_active_subscription
from app.services.filters import filter_items

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/landing-pages", tags=["Landing Pages"])

admin_only = require_role(UserRole.ADMIN)

SEARCH_FIELDS = ("title", "page_url", "oferta.title", "criativo.title")


def _ensure_target_exists(db: Session, link: Association) -> None:
    if isinstance(link, OfferLink):
        if not db.query(Offer).filter(Offer.id == link.oferta_id).first():
            raise HTTPException(status_code=400, detail="Offer not found")
    elif isinstance(link, CreativeLink):
        if not db.query(Criativo).filter(Criativo.id == link.criativo_id).first():
            raise HTTPException(status_code=400, detail="Creative not found")


def _get_page_or_404(db: Session, page_id: int) -> LandingPage:
    page = db.query(LandingPage).filter(LandingPage.id == page_id).first()
    if not page:
        raise HTTPException(status_code=404, detail="Landing page not found")
    return page


@router.get("", response_model=List[LandingPageOut])
def list_landing_pages(
    search: Optional[str] = Query(None, description="Search by title, URL, offer or creative title"),
    association: Optional[Literal["oferta", "criativo", "none"]] = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(require_active_subscription),
):
    pages = (
        db.query(LandingPage)
        .options(joinedload(LandingPage.oferta), joinedload(LandingPage.criativo))
        .order_by(LandingPage.created_at.desc())
        .all()
    )
    pages = filter_items(pages, search=search, search_fields=SEARCH_FIELDS)

    results = [LandingPageOut.from_model(page) for page in pages]
    if association == "none":
        return [r for r in results if r.association_type is None]
    if association:
        return [r for r in results if r.association_type == association]
    return results


@router.post("", response_model=LandingPageOut, status_code=status.HTTP_201_CREATED)
def create_landing_page(
    data: LandingPageCreate,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    if not data.title.strip() or not data.page_url.strip():
        raise HTTPException(status_code=400, detail="Title and URL are required")

    link = to_association(data.association)
    _ensure_target_exists(db, link)

    page = LandingPage(title=data.title.strip(), page_url=data.page_url.strip())
    page.association = link
    db.add(page)
    db.commit()
    db.refresh(page)
    logger.info("Created landing page %s (association=%r)", page.id, link)
    return LandingPageOut.from_model(page)


@router.patch("/{page_id}", response_model=LandingPageOut)
def update_landing_page(
    page_id: int,
    data: LandingPageUpdate,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    page = _get_page_or_404(db, page_id)

    if data.title is not None:
        if not data.title.strip():
            raise HTTPException(status_code=400, detail="Title cannot be empty")
        page.title = data.title.strip()
    if data.page_url is not None:
        if not data.page_url.strip():
            raise HTTPException(status_code=400, detail="URL cannot be empty")
        page.page_url = data.page_url.strip()
    if "association" in data.model_fields_set:
        link = to_association(data.association)
        _ensure_target_exists(db, link)
        page.association = link

    db.commit()
    db.refresh(page)
    return LandingPageOut.from_model(page)


@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_landing_page(
    page_id: int,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    page = _get_page_or_404(db, page_id)
    db.delete(page)
    db.commit()
    logger.info("Deleted landing page %s", page_id)
