"""
Interface de base pour les types de champs.

Ce module définit l'interface abstraite que doivent implémenter tous les types de champs:
extraction de la valeur soumise, colonne de contenu éventuelle, décodage typé, validation et
réaction après l'enregistrement de l'élément.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy.types import TypeEngine

from cmscontent.domain.entities import Element, Field

if TYPE_CHECKING:
    from cmscontent.infra.repo.element_repo import RelationsRepo


@dataclass
class FieldTypeContext:
    """Dépendances mises à disposition des types de champs (dépôts annexes)."""

    relations: RelationsRepo | None = None


class BaseFieldType(ABC):
    """Comportement d'un type de champ, lié à un champ et à un élément.

    Instance transitoire: recréée à chaque opération, jamais persistée.
    """

    type_tag: str = ""

    def __init__(
        self,
        field: Field,
        element: Element | None = None,
        context: FieldTypeContext | None = None,
    ) -> None:
        self.field = field
        self.element = element
        self.context = context or FieldTypeContext()

    @property
    def handle(self) -> str:
        return self.field.handle

    @property
    def settings(self) -> dict[str, Any]:
        return self.field.settings

    def get_input_value(self) -> Any:
        """Extrait la valeur soumise pour ce champ depuis l'élément lié (None si absente)."""
        if self.element is None:
            return None
        if self.handle not in self.element.field_input:
            return None
        return self.normalize_input(self.element.field_input[self.handle])

    def normalize_input(self, value: Any) -> Any:
        """Normalise une valeur soumise (chaînes de formulaire, etc.)."""
        return value

    @abstractmethod
    def define_content_attribute(self) -> TypeEngine | None:
        """Type de colonne de contenu, ou None si le champ n'a pas de colonne dédiée."""
        ...

    def has_own_column(self) -> bool:
        return self.define_content_attribute() is not None

    def prep_value(self, value: Any) -> Any:
        """Reconvertit une valeur stockée en valeur typée."""
        return value

    def validate(self, value: Any) -> list[str]:
        """Retourne les messages d'erreur propres au type (liste vide si valide)."""
        return []

    def on_after_element_save(self) -> None:
        """Appelé une fois après l'enregistrement complet de l'élément et de ses contenus."""
        return None
