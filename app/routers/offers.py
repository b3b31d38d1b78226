"""
Offer ("oferta") catalogue.

Members with an active subscription browse and open offers; admins create,
edit and delete them. Thumbnails live in blob storage: replacing one uploads
the new file, updates the row, then releases the old file with no rollback,
so a failed release leaks the old blob.
"""
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.errors import RemoteOperationError
from app.models.criativo import Criativo
from app.models.landing_page import LandingPage, AssociationType
from app.models.offer import Offer
from app.models.user import User, UserRole
from app.schemas.offers import (
    OfferOut,
    OfferDetailOut,
    OfferCriativoOut,
    OfferLandingPageOut,
    OfferFilterOptions,
)
from app.auth.dependencies import require_role, require_active_subscription
from app.services import blob_storage
from app.services.activity import record_content_access
from app.services.filters import filter_items, distinct_values

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ofertas", tags=["Offers"])

admin_only = require_role(UserRole.ADMIN)

MAX_THUMBNAIL_SIZE = settings.max_thumbnail_size_mb * 1024 * 1024
ALLOWED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif"}
CLASSIFICATION_FIELDS = ("tipo", "estrutura", "idioma", "nicho", "trafego")


def _clean(value: Optional[str]) -> Optional[str]:
    """Blank form values mean "not set"."""
    if value is None:
        return None
    value = value.strip()
    return value or None


async def _read_thumbnail(upload: UploadFile) -> bytes:
    ext = Path(upload.filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported image type. Allowed: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}",
        )
    content = await upload.read()
    if not content:
        raise HTTPException(status_code=400, detail="Thumbnail file is empty")
    if len(content) > MAX_THUMBNAIL_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Thumbnail exceeds {settings.max_thumbnail_size_mb}MB",
        )
    return content


def _release_thumbnail(url: Optional[str]) -> None:
    try:
        blob_storage.delete_blob(url)
    except RemoteOperationError as e:
        logger.warning("Leaving orphaned thumbnail %s: %s", url, e)


def _get_offer_or_404(db: Session, offer_id: int) -> Offer:
    offer = db.query(Offer).filter(Offer.id == offer_id).first()
    if not offer:
        raise HTTPException(status_code=404, detail="Offer not found")
    return offer


@router.get("", response_model=List[OfferOut])
def list_offers(
    search: Optional[str] = Query(None, description="Search by title"),
    tipo: Optional[str] = Query(None),
    estrutura: Optional[str] = Query(None),
    idioma: Optional[str] = Query(None),
    nicho: Optional[str] = Query(None),
    trafego: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(require_active_subscription),
):
    offers = db.query(Offer).order_by(Offer.created_at.desc()).all()
    return filter_items(
        offers,
        search=search,
        search_fields=("title",),
        tipo=tipo,
        estrutura=estrutura,
        idioma=idioma,
        nicho=nicho,
        trafego=trafego,
    )


@router.get("/filters", response_model=OfferFilterOptions)
def offer_filter_options(
    db: Session = Depends(get_db),
    _: User = Depends(require_active_subscription),
):
    """Distinct classification values present in the catalogue."""
    offers = db.query(Offer).all()
    return OfferFilterOptions(**{field: distinct_values(offers, field) for field in CLASSIFICATION_FIELDS})


@router.get("/{offer_id}", response_model=OfferDetailOut)
def get_offer(
    offer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_subscription),
):
    offer = _get_offer_or_404(db, offer_id)

    criativos = (
        db.query(Criativo)
        .filter(Criativo.oferta_id == offer.id)
        .order_by(Criativo.created_at.desc())
        .all()
    )
    landing_pages = (
        db.query(LandingPage)
        .filter(
            LandingPage.oferta_id == offer.id,
            LandingPage.association_type == AssociationType.OFERTA,
        )
        .all()
    )

    record_content_access(db, current_user, offer)
    db.commit()

    return OfferDetailOut(
        **OfferOut.model_validate(offer).model_dump(),
        criativos=[OfferCriativoOut.model_validate(c) for c in criativos],
        landing_pages=[OfferLandingPageOut.model_validate(p) for p in landing_pages],
    )


@router.post("", response_model=OfferOut, status_code=status.HTTP_201_CREATED)
async def create_offer(
    title: str = Form(...),
    drive_link: str = Form(...),
    tipo: Optional[str] = Form(None),
    estrutura: Optional[str] = Form(None),
    idioma: Optional[str] = Form(None),
    nicho: Optional[str] = Form(None),
    trafego: Optional[str] = Form(None),
    thumbnail: UploadFile = File(...),
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    if not title.strip() or not drive_link.strip():
        raise HTTPException(status_code=400, detail="Title and link are required")

    content = await _read_thumbnail(thumbnail)
    thumbnail_url = blob_storage.upload_blob(content, thumbnail.filename or "thumbnail")

    offer = Offer(
        title=title.strip(),
        drive_link=drive_link.strip(),
        thumbnail=thumbnail_url,
        tipo=_clean(tipo),
        estrutura=_clean(estrutura),
        idioma=_clean(idioma),
        nicho=_clean(nicho),
        trafego=_clean(trafego),
    )
    db.add(offer)
    db.commit()
    db.refresh(offer)
    logger.info("Created offer %s", offer.id)
    return offer


@router.patch("/{offer_id}", response_model=OfferOut)
async def update_offer(
    offer_id: int,
    title: Optional[str] = Form(None),
    drive_link: Optional[str] = Form(None),
    tipo: Optional[str] = Form(None),
    estrutura: Optional[str] = Form(None),
    idioma: Optional[str] = Form(None),
    nicho: Optional[str] = Form(None),
    trafego: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    offer = _get_offer_or_404(db, offer_id)

    if title is not None:
        if not title.strip():
            raise HTTPException(status_code=400, detail="Title cannot be empty")
        offer.title = title.strip()
    if drive_link is not None:
        if not drive_link.strip():
            raise HTTPException(status_code=400, detail="Link cannot be empty")
        offer.drive_link = drive_link.strip()

    classification = {"tipo": tipo, "estrutura": estrutura, "idioma": idioma, "nicho": nicho, "trafego": trafego}
    for field, value in classification.items():
        if value is not None:
            setattr(offer, field, _clean(value))

    old_thumbnail = None
    if thumbnail is not None and thumbnail.filename:
        content = await _read_thumbnail(thumbnail)
        old_thumbnail = offer.thumbnail
        offer.thumbnail = blob_storage.upload_blob(content, thumbnail.filename)

    db.commit()
    db.refresh(offer)

    if old_thumbnail:
        _release_thumbnail(old_thumbnail)

    return offer


@router.delete("/{offer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_offer(
    offer_id: int,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    offer = _get_offer_or_404(db, offer_id)
    thumbnail_url = offer.thumbnail
    db.delete(offer)
    db.commit()
    logger.info("Deleted offer %s", offer_id)

    _release_thumbnail(thumbnail_url)
