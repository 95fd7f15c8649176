"""
Entités du domaine métier.

Ce module définit les modèles de données principaux: éléments, champs et mises en page de champs
(field layouts).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field as PydanticField, field_validator

# Colonnes de base de la table `content`, interdites comme handles de champs
RESERVED_HANDLES = frozenset({"id", "element_id", "locale", "revision"})


class Element(BaseModel):
    """Élément persistant possédant des contenus localisés.

    `field_input` porte les valeurs soumises pour les champs de l'élément, indexées par handle.
    """

    id: int | None = None
    type: str = "default"
    locale: str | None = None
    enabled: bool = True
    field_input: dict[str, Any] = PydanticField(default_factory=dict)
    errors: dict[str, list[str]] = PydanticField(default_factory=dict)

    def is_saved(self) -> bool:
        """Indique si l'élément a déjà été enregistré (id positif)."""
        return bool(self.id)

    def add_error(self, attribute: str, message: str) -> None:
        self.errors.setdefault(attribute, []).append(message)

    def add_errors(self, errors: dict[str, list[str]]) -> None:
        """Ajoute les erreurs d'un autre modèle (ex. ContentModel) à celles de l'élément."""
        for attribute, messages in errors.items():
            for message in messages:
                self.add_error(attribute, message)

    def has_errors(self) -> bool:
        return any(self.errors.values())


class Field(BaseModel):
    """Champ typé configurable par type d'élément."""

    id: int
    handle: str
    name: str = ""
    type: str = "plain_text"
    translatable: bool = False
    settings: dict[str, Any] = PydanticField(default_factory=dict)

    @field_validator("handle")
    @classmethod
    def _check_handle(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError(f"invalid field handle: {value!r}")
        if value in RESERVED_HANDLES:
            raise ValueError(f"reserved field handle: {value!r}")
        return value


class FieldLayoutField(BaseModel):
    """Entrée d'une mise en page: un champ et son caractère obligatoire."""

    field: Field
    required: bool = False
    sort_order: int = 0


class FieldLayout(BaseModel):
    """Liste ordonnée de champs associée à un type d'élément."""

    id: int | None = None
    type: str = "default"
    fields: list[FieldLayoutField] = PydanticField(default_factory=list)

    def get_fields(self) -> list[FieldLayoutField]:
        """Retourne les entrées triées par `sort_order` (ordre d'insertion à égalité)."""
        return sorted(self.fields, key=lambda f: f.sort_order)

    def handles(self) -> list[str]:
        return [f.field.handle for f in self.get_fields()]

    def required_handles(self) -> list[str]:
        return [f.field.handle for f in self.get_fields() if f.required]
