# ============================================================
# Module : cmscontent/infra/repo/content_schema.py
# Objet  : Table `content` dynamique (une colonne par champ) et synchronisation du schéma.
# Notes  : les colonnes de champs sont ajoutées à chaud via les Operations Alembic.
# ============================================================

from __future__ import annotations

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table, UniqueConstraint, inspect
from sqlalchemy.engine import Engine
import structlog

from cmscontent.domain.field_registry import FieldRegistry
from cmscontent.infra.repo.models import Base, ElementORM

CONTENT_TABLE = "content"


def build_content_table(registry: FieldRegistry, metadata: MetaData | None = None) -> Table:
    """Construit la table `content`: colonnes de base + une colonne par champ du registre."""
    metadata = metadata if metadata is not None else MetaData()
    columns = [
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column(
            "element_id",
            Integer,
            ForeignKey(ElementORM.__table__.c.id, ondelete="CASCADE"),
            nullable=False,
        ),
        Column("locale", String(12), nullable=False),
        Column("revision", Integer, nullable=False, default=0, server_default="0"),
    ]
    for handle, column_type in registry.content_columns():
        columns.append(Column(handle, column_type, nullable=True))
    return Table(
        CONTENT_TABLE,
        metadata,
        *columns,
        UniqueConstraint("element_id", "locale", name="uq_content_element_locale"),
    )


class ContentTableManager:
    """Maintient la table physique `content` alignée sur le registre de champs."""

    def __init__(self, engine: Engine, registry: FieldRegistry) -> None:
        self.engine = engine
        self.registry = registry
        self.table = build_content_table(registry)
        self._log = structlog.get_logger(__name__).bind(component="content_schema")

    def create_all(self) -> None:
        """Crée les tables `elements`, `relations` et `content` si absentes, puis les colonnes."""
        Base.metadata.create_all(self.engine)
        self.table.metadata.create_all(self.engine)
        self.sync_columns()

    def sync_columns(self) -> list[str]:
        """Ajoute les colonnes de champs manquantes. Retourne les handles ajoutés."""
        added: list[str] = []
        with self.engine.begin() as conn:
            existing = {c["name"] for c in inspect(conn).get_columns(CONTENT_TABLE)}
            op = Operations(MigrationContext.configure(conn))
            for handle, column_type in self.registry.content_columns():
                if handle in existing:
                    continue
                op.add_column(CONTENT_TABLE, Column(handle, column_type, nullable=True))
                added.append(handle)
        if added:
            self._log.info("content_columns_added", columns=added)
        return added
