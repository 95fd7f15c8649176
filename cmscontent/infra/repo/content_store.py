# ============================================================
# Module : cmscontent/infra/repo/content_store.py
# Objet  : Accès SQL à la table `content` (une ligne par élément et par locale).
# ============================================================

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Table, insert, select, update
from sqlalchemy.orm import Session

from cmscontent.core.errors import ContentConflictError


class SqlContentStore:
    """Dépôt SQL des lignes de contenu, lié à une session.

    Les lignes sont manipulées sous forme de dicts {colonne: valeur}.
    """

    def __init__(self, session: Session, table: Table) -> None:
        """Construit le dépôt avec une session (SQLAlchemy) et la table `content`."""
        self._session = session
        self.table = table

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Ouvre une transaction, ou un SAVEPOINT si une transaction est déjà en cours."""
        if self._session.in_transaction():
            with self._session.begin_nested():
                yield
        else:
            with self._session.begin():
                yield

    @contextmanager
    def savepoint(self) -> Iterator[None]:
        """Ouvre un SAVEPOINT. La transaction englobante (démarrée au besoin) reste à valider
        par l'appelant."""
        with self._session.begin_nested():
            yield

    def find_one(self, element_id: int, locale: str | None = None) -> dict[str, Any] | None:
        """Retourne la ligne de `element_id` (pour `locale` si fournie), ou None."""
        stmt = select(self.table).where(self.table.c.element_id == element_id)
        if locale:
            stmt = stmt.where(self.table.c.locale == locale)
        stmt = stmt.order_by(self.table.c.id).limit(1)
        row = self._session.execute(stmt).mappings().first()
        return dict(row) if row else None

    def find_many(
        self, element_id: int, exclude_locale: str, for_update: bool = False
    ) -> list[dict[str, Any]]:
        """Retourne les lignes de `element_id` dans les autres locales que `exclude_locale`.

        `for_update` verrouille les lignes lues sur les moteurs qui le supportent.
        """
        stmt = (
            select(self.table)
            .where(self.table.c.element_id == element_id)
            .where(self.table.c.locale != exclude_locale)
            .order_by(self.table.c.locale)
        )
        if for_update:
            stmt = stmt.with_for_update()
        return [dict(r) for r in self._session.execute(stmt).mappings().all()]

    def insert(self, values: dict[str, Any]) -> int:
        """Insère une ligne et retourne l'identifiant généré."""
        values = {k: v for k, v in values.items() if not (k == "id" and v is None)}
        result = self._session.execute(insert(self.table).values(**values))
        return int(result.inserted_primary_key[0])

    def update(
        self, content_id: int, values: dict[str, Any], expected_revision: int | None = None
    ) -> int:
        """Met à jour la ligne `content_id`. Retourne le nombre de lignes affectées.

        Avec `expected_revision`, la mise à jour ne s'applique qu'à cette révision et l'incrémente;
        une ligne existante à une autre révision lève ContentConflictError.
        """
        values = {k: v for k, v in values.items() if k not in ("id", "revision")}
        stmt = update(self.table).where(self.table.c.id == content_id)
        if expected_revision is not None:
            stmt = stmt.where(self.table.c.revision == expected_revision)
            values["revision"] = expected_revision + 1
        result = self._session.execute(stmt.values(**values))
        affected = result.rowcount or 0
        if affected == 0 and expected_revision is not None and self.exists(content_id):
            raise ContentConflictError(content_id, expected_revision)
        return affected

    def exists(self, content_id: int) -> bool:
        stmt = select(self.table.c.id).where(self.table.c.id == content_id)
        return self._session.execute(stmt).first() is not None
