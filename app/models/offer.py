from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class Offer(Base):
    """Curated offer ("oferta") published to members"""
    __tablename__ = "contents"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    thumbnail = Column(Text, nullable=False)
    drive_link = Column(Text, nullable=False)

    # Classification
    tipo = Column(String(100), nullable=True)
    estrutura = Column(String(255), nullable=True)
    idioma = Column(String(50), nullable=True)
    nicho = Column(String(100), nullable=True)
    trafego = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    criativos = relationship("Criativo", back_populates="oferta", passive_deletes=True)
    accesses = relationship("ContentAccess", back_populates="content", cascade="all, delete-orphan")
