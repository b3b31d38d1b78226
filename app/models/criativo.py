from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class Criativo(Base):
    """Ad creative, optionally tied to one offer"""
    __tablename__ = "criativos"

    id = Column(Integer, primary_key=True, index=True)
    oferta_id = Column(Integer, ForeignKey("contents.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    drive_link = Column(Text, nullable=False)
    nicho = Column(String(100), nullable=True)
    trafego = Column(String(100), nullable=True)
    idioma = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    oferta = relationship("Offer", back_populates="criativos")
