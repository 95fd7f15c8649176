"""Erreurs du domaine de persistance des contenus.

Ce module définit la hiérarchie d'exceptions levées par le service de contenus. Les échecs de
validation ne sont jamais des exceptions: ils sont rapportés par un booléen et un dictionnaire
d'erreurs par champ.
"""

from __future__ import annotations


class ContentError(Exception):
    """Base class for content persistence errors."""


class UnsavedElementError(ContentError):
    """Le contenu d'un élément jamais enregistré ne peut pas être sauvegardé.

    Signale une erreur d'intégration (l'appelant a passé un élément sans id), pas une condition
    utilisateur.
    """

    def __init__(self, message: str = "Cannot save the content of an unsaved element.") -> None:
        super().__init__(message)


class ContentConflictError(ContentError):
    """Concurrent write detected on a content row (stale revision).

    Retryable: the caller may reload the row and replay the save.
    """

    retryable = True

    def __init__(self, content_id: int, expected_revision: int) -> None:
        super().__init__(
            f"Content row {content_id} was modified concurrently "
            f"(expected revision {expected_revision})."
        )
        self.content_id = content_id
        self.expected_revision = expected_revision


class PropagationError(ContentError):
    """Échec de la recopie des champs non traduisibles vers les autres locales."""

    def __init__(self, element_id: int, failed_locales: list[str]) -> None:
        super().__init__(
            f"Could not propagate content of element {element_id} "
            f"to locales: {', '.join(failed_locales)}"
        )
        self.element_id = element_id
        self.failed_locales = failed_locales


class FieldDefinitionError(ContentError, ValueError):
    """Définition de champ invalide (handle réservé, doublon, type inconnu)."""
