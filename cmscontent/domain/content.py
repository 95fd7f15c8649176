"""
Modèle de contenu localisé (POPO).

Ce module définit le modèle de domaine ContentModel: l'état des valeurs de champs d'un élément
pour une locale donnée, tel qu'il est lu ou écrit dans la table `content`.
"""

# ============================================================
# Module : cmscontent/domain/content.py
# Objet  : Ligne de contenu (élément x locale) et validation.
# ============================================================

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

Validator = Callable[[Any], list[str]]


def is_empty_value(value: Any) -> bool:
    """Retourne True pour None, chaîne vide/blanche et collections vides."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


@dataclass
class ContentModel:
    """
    Contenu d'un élément pour une locale.

    Attributs
    - id: identifiant de la ligne (None avant la première insertion).
    - element_id: élément propriétaire (immuable une fois défini).
    - locale: identifiant de locale.
    - revision: jeton de concurrence optimiste, incrémenté à chaque mise à jour.
    - values: valeurs des champs indexées par handle.
    - required_fields: handles obligatoires pour la mise en page courante.
    - validators: contrôles par champ, fournis par les types de champs.
    - errors: erreurs de la dernière validation, par handle.
    """

    id: int | None = None
    element_id: int | None = None
    locale: str | None = None
    revision: int = 0
    values: dict[str, Any] = field(default_factory=dict)
    required_fields: list[str] = field(default_factory=list)
    validators: dict[str, Validator] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_row(
        cls,
        row: Mapping[str, Any],
        decode: Callable[[str, Any], Any] | None = None,
    ) -> ContentModel:
        """Construit un modèle à partir d'une ligne de la table `content`.

        `decode(handle, stored)` reconvertit les valeurs stockées en valeurs typées.
        """
        values: dict[str, Any] = {}
        for key, stored in row.items():
            if key in ("id", "element_id", "locale", "revision"):
                continue
            values[key] = decode(key, stored) if decode else stored
        return cls(
            id=row.get("id"),
            element_id=row.get("element_id"),
            locale=row.get("locale"),
            revision=row.get("revision") or 0,
            values=values,
        )

    def get_value(self, handle: str, default: Any = None) -> Any:
        return self.values.get(handle, default)

    def set_value(self, handle: str, value: Any) -> None:
        self.values[handle] = value

    def has_value(self, handle: str) -> bool:
        return handle in self.values

    def set_required_fields(self, handles: list[str]) -> None:
        self.required_fields = list(handles)

    def add_error(self, handle: str, message: str) -> None:
        self.errors.setdefault(handle, []).append(message)

    def get_errors(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self.errors.items() if v}

    def validate(self) -> bool:
        """Valide les champs obligatoires puis les contraintes propres à chaque champ.

        Réinitialise `errors` avant chaque passe.
        """
        self.errors = {}
        for handle in self.required_fields:
            if is_empty_value(self.values.get(handle)):
                self.add_error(handle, f"{handle} cannot be blank.")
        for handle, validator in self.validators.items():
            value = self.values.get(handle)
            if is_empty_value(value):
                continue
            for message in validator(value):
                self.add_error(handle, message)
        return not self.errors
