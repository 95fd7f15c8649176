# ============================================================
# Module : cmscontent/services/content_service.py
# Objet  : Population, validation, persistance et propagation multi-locales des contenus.
# Contexte : Les champs non traduisibles sont recopiés dans toutes les autres locales de
#            l'élément; la propagation est atomique avec l'écriture principale.
# ============================================================

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError

from cmscontent.core.errors import ContentConflictError, PropagationError, UnsavedElementError
from cmscontent.core.metrics import (
    CONTENT_CONFLICTS_TOTAL,
    CONTENT_PROPAGATED_ROWS_TOTAL,
    CONTENT_PROPAGATION_FAILURES_TOTAL,
    CONTENT_SAVES_TOTAL,
)
from cmscontent.domain.content import ContentModel
from cmscontent.domain.entities import Element, FieldLayout
from cmscontent.domain.field_registry import FieldRegistry
from cmscontent.domain.fieldtypes import BaseFieldType, FieldTypeContext
from cmscontent.domain.i18n import LocaleProvider
from cmscontent.domain.packaging import package_attribute_value
from cmscontent.infra.repo.content_store import SqlContentStore


class ContentService:
    """Service métier des contenus d'éléments.

    Responsabilités:
    - Charger la ligne de contenu d'un élément pour une locale.
    - Peupler une ligne depuis les valeurs soumises, selon une mise en page de champs.
    - Valider et persister la ligne (insertion ou mise à jour avec jeton de révision).
    - Recopier les champs non traduisibles dans les autres locales, puis appeler les hooks.
    """

    def __init__(
        self,
        fields: FieldRegistry,
        store: SqlContentStore,
        i18n: LocaleProvider,
        field_type_context: FieldTypeContext | None = None,
    ) -> None:
        """Initialise le service avec ses dépendances.

        Paramètres:
        - fields: registre des champs et des types de champs.
        - store: dépôt de la table `content`, lié à la session courante.
        - i18n: fournisseur de locales.
        - field_type_context: dépendances des types de champs (relations), liées à la session.
        """
        self.fields = fields
        self.store = store
        self.i18n = i18n
        self.field_type_context = field_type_context
        self._log = structlog.get_logger(__name__).bind(component="content_service")

    def _field_type(self, field, element: Element | None = None) -> BaseFieldType:
        return self.fields.populate_field_type(field, element, self.field_type_context)

    def _decode(self, handle: str, stored: Any) -> Any:
        field = self.fields.get_field_by_handle(handle)
        if field is None:
            return stored
        return self._field_type(field).prep_value(stored)

    def get_content(self, element_id: int, locale: str | None = None) -> ContentModel | None:
        """Retourne le contenu d'un élément pour `locale` (ou toute locale si None), sinon None."""
        if not element_id or element_id <= 0:
            raise ValueError(f"element_id must be a positive integer, got {element_id!r}")
        row = self.store.find_one(element_id, locale)
        if row is None:
            return None
        return ContentModel.from_row(row, decode=self._decode)

    def save_element_content(
        self, element: Element, field_layout: FieldLayout, locale: str | None = None
    ) -> bool:
        """Enregistre le contenu d'un élément déjà persisté.

        Enchaîne populate_content_from_input(), save_content() et post_save_operations() dans une
        seule transaction. À utiliser quand le contenu est enregistré séparément des autres
        attributs de l'élément.

        Lève UnsavedElementError avant tout accès au dépôt si l'élément n'a pas d'id, et
        PropagationError (écriture principale annulée) si une autre locale n'a pu être mise à jour.
        """
        if not element.id:
            raise UnsavedElementError()

        with self.store.transaction():
            content = self.populate_content_from_input(element, field_layout, locale)
            if not self.save_content(content):
                element.add_errors(content.get_errors())
                return False
            self.post_save_operations(element, content)
        return True

    def populate_content_from_input(
        self, element: Element, field_layout: FieldLayout, locale: str | None = None
    ) -> ContentModel:
        """Peuple un ContentModel avec les valeurs soumises pour les champs de la mise en page.

        Les champs hors mise en page conservent leur valeur chargée; un champ de la mise en page
        sans valeur soumise conserve aussi sa valeur existante.
        """
        if not locale and self.i18n.is_localized():
            locale = self.i18n.get_primary_site_locale_id()

        content = None
        if element.id:
            content = self.get_content(element.id, locale)

        if content is None:
            content = ContentModel(
                element_id=element.id,
                locale=locale or self.i18n.get_primary_site_locale_id(),
            )
            if element.id and self.i18n.is_localized():
                self._seed_shared_values(element.id, content)

        content.set_required_fields(field_layout.required_handles())

        content.validators = {}
        for layout_field in field_layout.get_fields():
            field = layout_field.field
            field_type = self._field_type(field, element)
            if field.handle in element.field_input or not content.has_value(field.handle):
                content.set_value(field.handle, field_type.get_input_value())
            content.validators[field.handle] = field_type.validate

        return content

    def _seed_shared_values(self, element_id: int, content: ContentModel) -> None:
        """Reprend les valeurs non traduisibles d'une autre locale pour une nouvelle ligne.

        La ligne de la locale principale est préférée; sans ligne existante, rien n'est repris.
        """
        rows = self.store.find_many(element_id, content.locale)
        if not rows:
            return
        primary = self.i18n.get_primary_site_locale_id()
        source_row = next((r for r in rows if r["locale"] == primary), rows[0])
        source = ContentModel.from_row(source_row, decode=self._decode)
        for field in self.fields.get_all_fields():
            if not field.translatable and self._field_type(field).has_own_column():
                content.set_value(field.handle, source.get_value(field.handle))

    def save_content(self, content: ContentModel, validate: bool = True) -> bool:
        """Enregistre un ContentModel en base.

        Paramètres:
        - content: ligne à écrire (insertion si `id` est vide, mise à jour sinon).
        - validate: appelle `content.validate()` d'abord; aucune écriture si la validation échoue.

        Retour: True si au moins une ligne a été écrite. Lève ContentConflictError si la ligne a
        été modifiée depuis sa lecture.
        """
        if validate and not content.validate():
            CONTENT_SAVES_TOTAL.labels(result="invalid").inc()
            self._log.info(
                "content_validation_failed",
                element_id=content.element_id,
                locale=content.locale,
                fields=sorted(content.get_errors()),
            )
            return False

        values: dict[str, Any] = {
            "id": content.id,
            "element_id": content.element_id,
            "locale": content.locale,
        }
        for field in self.fields.get_all_fields():
            # Only include this value if the content table has a column for it
            if self._field_type(field).has_own_column():
                values[field.handle] = package_attribute_value(
                    content.get_value(field.handle), json_encode=True
                )

        if content.id:
            try:
                affected = self.store.update(content.id, values, expected_revision=content.revision)
            except ContentConflictError:
                CONTENT_CONFLICTS_TOTAL.inc()
                self._log.warning(
                    "content_conflict",
                    content_id=content.id,
                    element_id=content.element_id,
                    locale=content.locale,
                    revision=content.revision,
                )
                raise
            if affected:
                content.revision += 1
            result = "updated" if affected else "noop"
        else:
            try:
                with self.store.savepoint():
                    content.id = self.store.insert(values)
            except IntegrityError as err:
                CONTENT_SAVES_TOTAL.labels(result="failed").inc()
                self._log.warning(
                    "content_insert_failed",
                    element_id=content.element_id,
                    locale=content.locale,
                    error=type(err.orig).__name__,
                )
                return False
            affected = 1
            result = "inserted"

        CONTENT_SAVES_TOTAL.labels(result=result).inc()
        self._log.debug(
            "content_saved",
            content_id=content.id,
            element_id=content.element_id,
            locale=content.locale,
            result=result,
        )
        return bool(affected)

    def post_save_operations(self, element: Element, content: ContentModel) -> None:
        """Opérations post-enregistrement: propagation multi-locales puis hooks des types.

        Les valeurs des champs non traduisibles possédant une colonne sont recopiées dans les
        lignes des autres locales (sans validation). Chaque hook `on_after_element_save` est
        appelé une seule fois, après la propagation.
        """
        other_contents: list[ContentModel] = []
        if self.i18n.is_localized():
            rows = self.store.find_many(element.id, content.locale, for_update=True)
            other_contents = [ContentModel.from_row(r, decode=self._decode) for r in rows]

        field_types: list[BaseFieldType] = []
        mutated = False
        for field in self.fields.get_all_fields():
            field_type = self._field_type(field, element)
            field_types.append(field_type)

            # If this field isn't translatable, set its new value on the other content rows
            if not field.translatable and other_contents and field_type.has_own_column():
                for other in other_contents:
                    other.set_value(field.handle, content.get_value(field.handle))
                mutated = True

        if mutated:
            self._propagate(element, other_contents)

        for field_type in field_types:
            field_type.on_after_element_save()

    def _propagate(self, element: Element, other_contents: list[ContentModel]) -> None:
        failed: list[str] = []
        for other in other_contents:
            try:
                saved = self.save_content(other, validate=False)
            except ContentConflictError:
                saved = False
            if saved:
                CONTENT_PROPAGATED_ROWS_TOTAL.inc()
            else:
                CONTENT_PROPAGATION_FAILURES_TOTAL.inc()
                failed.append(other.locale or "")

        if failed:
            self._log.error(
                "content_propagation_failed", element_id=element.id, locales=failed
            )
            raise PropagationError(element.id or 0, failed)
        self._log.debug(
            "content_propagated",
            element_id=element.id,
            locales=[c.locale for c in other_contents],
        )
