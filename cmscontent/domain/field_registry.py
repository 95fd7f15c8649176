"""
Registre des champs et des types de champs.

Ce module fournit le registre qui connaît l'ensemble ordonné des champs définis, et qui
instancie pour chacun le type de champ (handler) correspondant à son étiquette de type.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from sqlalchemy.types import TypeEngine

from cmscontent.core.errors import FieldDefinitionError
from cmscontent.domain.entities import Element, Field
from cmscontent.domain.fieldtypes import DEFAULT_FIELD_TYPES, BaseFieldType, FieldTypeContext


class FieldRegistry:
    """Registre en mémoire des champs et des fabriques de types de champs.

    Responsabilités:
    - Conserver les champs (ordre par id) avec unicité des handles et des ids.
    - Associer une étiquette de type à une classe de type de champ.
    - Instancier un type de champ lié à un élément.
    """

    def __init__(
        self,
        fields: Iterable[Field] = (),
        field_types: dict[str, type[BaseFieldType]] | None = None,
        context: FieldTypeContext | None = None,
    ) -> None:
        self._field_types: dict[str, type[BaseFieldType]] = dict(
            field_types if field_types is not None else DEFAULT_FIELD_TYPES
        )
        self._fields: dict[int, Field] = {}
        self._by_handle: dict[str, Field] = {}
        self.context = context or FieldTypeContext()
        for f in fields:
            self.add_field(f)

    @classmethod
    def from_definitions(cls, definitions: Iterable[dict[str, Any]], **kwargs: Any) -> FieldRegistry:
        """Construit un registre depuis des définitions brutes (dicts)."""
        fields = []
        for raw in definitions:
            try:
                fields.append(Field.model_validate(raw))
            except ValidationError as err:
                raise FieldDefinitionError(f"invalid field definition {raw!r}: {err}") from err
        return cls(fields, **kwargs)

    @classmethod
    def load_from_file(cls, path: str | Path, **kwargs: Any) -> FieldRegistry:
        """Charge une liste JSON de définitions de champs."""
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise FieldDefinitionError(f"{path}: expected a JSON list of field definitions")
        return cls.from_definitions(raw, **kwargs)

    def register_field_type(self, type_tag: str, cls: type[BaseFieldType]) -> None:
        self._field_types[type_tag] = cls

    def add_field(self, field: Field) -> None:
        if field.type not in self._field_types:
            raise FieldDefinitionError(f"unknown field type {field.type!r} for {field.handle!r}")
        if field.id in self._fields:
            raise FieldDefinitionError(f"duplicate field id {field.id}")
        if field.handle in self._by_handle:
            raise FieldDefinitionError(f"duplicate field handle {field.handle!r}")
        self._fields[field.id] = field
        self._by_handle[field.handle] = field

    def get_all_fields(self) -> list[Field]:
        return [self._fields[k] for k in sorted(self._fields)]

    def get_field_by_handle(self, handle: str) -> Field | None:
        return self._by_handle.get(handle)

    def get_field_by_id(self, field_id: int) -> Field | None:
        return self._fields.get(field_id)

    def populate_field_type(
        self,
        field: Field,
        element: Element | None = None,
        context: FieldTypeContext | None = None,
    ) -> BaseFieldType:
        """Instancie le type de champ de `field`, lié à `element`.

        `context` remplace le contexte par défaut du registre (dépôts liés à une session).
        """
        cls = self._field_types.get(field.type)
        if cls is None:
            raise FieldDefinitionError(f"unknown field type {field.type!r} for {field.handle!r}")
        return cls(field, element, context or self.context)

    def content_columns(self) -> list[tuple[str, TypeEngine]]:
        """Colonnes de contenu (handle, type SQL) des champs qui en définissent une."""
        columns = []
        for f in self.get_all_fields():
            column_type = self.populate_field_type(f).define_content_attribute()
            if column_type is not None:
                columns.append((f.handle, column_type))
        return columns
