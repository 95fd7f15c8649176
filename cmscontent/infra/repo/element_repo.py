# ============================================================
# Module : cmscontent/infra/repo/element_repo.py
# Objet  : Accès SQL (CRUD) pour les éléments et leurs relations.
# ============================================================

from __future__ import annotations

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from cmscontent.domain.entities import Element
from .models import ElementORM, RelationORM


class ElementRepo:
    """CRUD minimal pour les éléments."""

    def __init__(self, session: Session) -> None:
        """Construit le repo avec une session (SQLAlchemy)."""
        self._session = session

    def create(self, element: Element) -> int:
        """Insère l'élément et lui affecte l'identifiant généré."""
        row = ElementORM(type=element.type, enabled=element.enabled)
        self._session.add(row)
        self._session.flush()
        element.id = row.id
        return row.id

    def get(self, element_id: int) -> Element | None:
        row = self._session.get(ElementORM, element_id)
        if not row:
            return None
        return Element(id=row.id, type=row.type, enabled=row.enabled)

    def exists(self, element_id: int) -> bool:
        stmt = select(ElementORM.id).where(ElementORM.id == element_id)
        return self._session.execute(stmt).first() is not None

    def delete(self, element_id: int) -> bool:
        """Supprime l'élément; contenus et relations suivent par ON DELETE CASCADE."""
        result = self._session.execute(delete(ElementORM).where(ElementORM.id == element_id))
        return bool(result.rowcount)


class RelationsRepo:
    """Relations ordonnées (parent -> enfants) portées par un champ."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def replace(self, field_id: int, parent_id: int, child_ids: list[int]) -> None:
        """Remplace les relations de (`field_id`, `parent_id`) par `child_ids`, dans l'ordre."""
        self._session.execute(
            delete(RelationORM).where(
                RelationORM.field_id == field_id, RelationORM.parent_id == parent_id
            )
        )
        if not child_ids:
            return
        self._session.execute(
            insert(RelationORM),
            [
                {
                    "field_id": field_id,
                    "parent_id": parent_id,
                    "child_id": child_id,
                    "sort_order": position,
                }
                for position, child_id in enumerate(child_ids, start=1)
            ],
        )

    def child_ids(self, field_id: int, parent_id: int) -> list[int]:
        stmt = (
            select(RelationORM.child_id)
            .where(RelationORM.field_id == field_id, RelationORM.parent_id == parent_id)
            .order_by(RelationORM.sort_order)
        )
        return list(self._session.execute(stmt).scalars().all())

    def missing_ids(self, element_ids: list[int]) -> list[int]:
        """Retourne, dans l'ordre, les identifiants sans ligne `elements` correspondante."""
        if not element_ids:
            return []
        stmt = select(ElementORM.id).where(ElementORM.id.in_(element_ids))
        found = set(self._session.execute(stmt).scalars().all())
        return [i for i in element_ids if i not in found]
