"""Types de champs disponibles, indexés par étiquette de type."""

from cmscontent.domain.fieldtypes.base import BaseFieldType, FieldTypeContext
from cmscontent.domain.fieldtypes.relations import Entries
from cmscontent.domain.fieldtypes.scalar import Lightswitch, Number, PlainText
from cmscontent.domain.fieldtypes.structured import Checkboxes, Date

DEFAULT_FIELD_TYPES: dict[str, type[BaseFieldType]] = {
    cls.type_tag: cls for cls in (PlainText, Number, Lightswitch, Date, Checkboxes, Entries)
}

__all__ = [
    "DEFAULT_FIELD_TYPES",
    "BaseFieldType",
    "Checkboxes",
    "Date",
    "Entries",
    "FieldTypeContext",
    "Lightswitch",
    "Number",
    "PlainText",
]
