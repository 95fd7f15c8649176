"""Enregistrement d'un élément et de son contenu dans une même transaction."""

from __future__ import annotations

import structlog

from cmscontent.domain.entities import Element, FieldLayout
from cmscontent.infra.repo.element_repo import ElementRepo
from cmscontent.services.content_service import ContentService


class _ContentNotSaved(Exception):
    """Annule la transaction de save_element quand l'écriture du contenu échoue."""


class ElementsService:
    """Orchestration élément + contenu.

    Le contenu est validé avant la création de l'élément; si son écriture échoue ensuite,
    la création de l'élément est annulée avec elle.
    """

    def __init__(self, elements: ElementRepo, content: ContentService) -> None:
        self.elements = elements
        self.content = content
        self._log = structlog.get_logger(__name__).bind(component="elements_service")

    def get_element_by_id(self, element_id: int) -> Element | None:
        return self.elements.get(element_id)

    def save_element(
        self, element: Element, field_layout: FieldLayout, locale: str | None = None
    ) -> bool:
        """Crée l'élément s'il n'est pas encore enregistré, puis enregistre son contenu.

        Retour: False (avec erreurs recopiées sur l'élément) si le contenu est invalide.
        """
        is_new = not element.id
        try:
            with self.content.store.transaction():
                content = self.content.populate_content_from_input(element, field_layout, locale)
                if not content.validate():
                    element.add_errors(content.get_errors())
                    return False

                if is_new:
                    self.elements.create(element)
                    content.element_id = element.id

                if not self.content.save_content(content, validate=False):
                    raise _ContentNotSaved()
                self.content.post_save_operations(element, content)
        except _ContentNotSaved:
            if is_new:
                element.id = None
            self._log.warning("element_content_not_saved", element_type=element.type)
            return False
        except Exception:
            if is_new:
                element.id = None
            raise

        self._log.info("element_saved", element_id=element.id, created=is_new)
        return True

    def delete_element_by_id(self, element_id: int) -> bool:
        """Supprime l'élément; ses contenus et relations sont supprimés en cascade."""
        return self.elements.delete(element_id)
