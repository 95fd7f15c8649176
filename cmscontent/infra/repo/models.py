"""SQLAlchemy models for persistence layer (elements, relations)."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class ElementORM(Base):
    """Modèle ORM pour les éléments (propriétaires des contenus)."""

    __tablename__ = "elements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(150), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    date_created = Column(DateTime, nullable=False, default=_utcnow)
    date_updated = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class RelationORM(Base):
    """Modèle ORM pour les relations entre éléments portées par un champ."""

    __tablename__ = "relations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    field_id = Column(Integer, nullable=False)
    parent_id = Column(Integer, ForeignKey("elements.id", ondelete="CASCADE"), nullable=False)
    child_id = Column(Integer, ForeignKey("elements.id", ondelete="CASCADE"), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("field_id", "parent_id", "child_id", name="uq_relations_field_parent_child"),
    )
