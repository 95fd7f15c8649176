"""Type de champ relationnel: liste ordonnée d'éléments liés, sans colonne de contenu."""

from __future__ import annotations

from typing import Any

import structlog

from cmscontent.domain.fieldtypes.base import BaseFieldType


class Entries(BaseFieldType):
    """Relation vers d'autres éléments.

    Les identifiants soumis sont écrits dans la table `relations` par le hook post-enregistrement,
    jamais dans la table `content`.
    """

    type_tag = "entries"

    def normalize_input(self, value: Any) -> Any:
        if value is None or value == "":
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        ids: list[int] = []
        for raw in value:
            try:
                child_id = int(raw)
            except (TypeError, ValueError):
                continue
            if child_id > 0 and child_id not in ids:
                ids.append(child_id)
        return ids

    def define_content_attribute(self):
        return None

    def validate(self, value: Any) -> list[str]:
        limit = self.settings.get("limit")
        errors = []
        if limit and len(value) > int(limit):
            errors.append(f"{self.handle} should contain at most {limit} elements.")
        relations = self.context.relations
        if value and relations is not None:
            unknown = relations.missing_ids(list(value))
            if unknown:
                errors.append(
                    f"{self.handle} contains unknown elements: {', '.join(map(str, unknown))}."
                )
        return errors

    def on_after_element_save(self) -> None:
        if self.element is None or not self.element.id:
            return
        if self.handle not in self.element.field_input:
            return
        relations = self.context.relations
        if relations is None:
            structlog.get_logger(__name__).warning(
                "relations_repo_missing", field=self.handle, element_id=self.element.id
            )
            return
        child_ids = self.get_input_value()
        limit = self.settings.get("limit")
        if limit:
            child_ids = child_ids[: int(limit)]
        relations.replace(self.field.id, self.element.id, child_ids)
