"""
Creative ("criativo") catalogue, each optionally tied to one offer.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.models.criativo import Criativo
from app.models.offer import Offer
from app.models.user import User, UserRole
from app.schemas.criativos import CriativoCreate, CriativoUpdate, CriativoOut
from app.auth.dependencies import require_role, require_active_subscription
from app.services.filters import filter_items

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/criativos", tags=["Creatives"])

admin_only = require_role(UserRole.ADMIN)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _ensure_offer_exists(db: Session, oferta_id: Optional[int]) -> None:
    if oferta_id is None:
        return
    if not db.query(Offer).filter(Offer.id == oferta_id).first():
        raise HTTPException(status_code=400, detail="Offer not found")


def _get_criativo_or_404(db: Session, criativo_id: int) -> Criativo:
    criativo = db.query(Criativo).filter(Criativo.id == criativo_id).first()
    if not criativo:
        raise HTTPException(status_code=404, detail="Creative not found")
    return criativo


@router.get("", response_model=List[CriativoOut])
def list_criativos(
    search: Optional[str] = Query(None, description="Search by title or offer title"),
    nicho: Optional[str] = Query(None),
    trafego: Optional[str] = Query(None),
    idioma: Optional[str] = Query(None),
    oferta: Optional[str] = Query(None, description="Exact offer title"),
    has_offer: Optional[bool] = Query(None, description="true: only with offer, false: only without"),
    db: Session = Depends(get_db),
    _: User = Depends(require_active_subscription),
):
    criativos = (
        db.query(Criativo)
        .options(joinedload(Criativo.oferta))
        .order_by(Criativo.created_at.desc())
        .all()
    )
    if has_offer is not None:
        criativos = [c for c in criativos if (c.oferta_id is not None) == has_offer]

    return filter_items(
        criativos,
        search=search,
        search_fields=("title", "oferta.title"),
        nicho=nicho,
        trafego=trafego,
        idioma=idioma,
        **{"oferta.title": oferta},
    )


@router.post("", response_model=CriativoOut, status_code=status.HTTP_201_CREATED)
def create_criativo(
    data: CriativoCreate,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    if not data.title.strip() or not data.drive_link.strip():
        raise HTTPException(status_code=400, detail="Title and link are required")
    _ensure_offer_exists(db, data.oferta_id)

    criativo = Criativo(
        title=data.title.strip(),
        drive_link=data.drive_link.strip(),
        oferta_id=data.oferta_id,
        nicho=_blank_to_none(data.nicho),
        trafego=_blank_to_none(data.trafego),
        idioma=_blank_to_none(data.idioma),
    )
    db.add(criativo)
    db.commit()
    db.refresh(criativo)
    logger.info("Created creative %s (offer=%s)", criativo.id, criativo.oferta_id)
    return criativo


@router.patch("/{criativo_id}", response_model=CriativoOut)
def update_criativo(
    criativo_id: int,
    data: CriativoUpdate,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    criativo = _get_criativo_or_404(db, criativo_id)
    fields = data.model_fields_set

    if data.title is not None:
        if not data.title.strip():
            raise HTTPException(status_code=400, detail="Title cannot be empty")
        criativo.title = data.title.strip()
    if data.drive_link is not None:
        if not data.drive_link.strip():
            raise HTTPException(status_code=400, detail="Link cannot be empty")
        criativo.drive_link = data.drive_link.strip()
    if "oferta_id" in fields:
        _ensure_offer_exists(db, data.oferta_id)
        criativo.oferta_id = data.oferta_id
    for field in ("nicho", "trafego", "idioma"):
        if field in fields:
            setattr(criativo, field, _blank_to_none(getattr(data, field)))

    db.commit()
    db.refresh(criativo)
    return criativo


@router.delete("/{criativo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_criativo(
    criativo_id: int,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    criativo = _get_criativo_or_404(db, criativo_id)
    db.delete(criativo)
    db.commit()
    logger.info("Deleted creative %s", criativo_id)
