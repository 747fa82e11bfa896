"""Value model shared by the parser and the serializer.

Every value is immutable: arrays hold tuples and mapping entries are exposed
through read-only proxies, so a constant substituted in several places can
be shared safely.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any
from typing import Literal as TypingLiteral

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, validate_default=True)


class _ReadOnlyEntries(_Frozen):
    entries: Mapping[str, "Value"] = {}

    @field_validator("entries")
    @classmethod
    def _read_only(cls, entries: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, key: str) -> "Value":
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def keys(self):
        return self.entries.keys()

    def items(self):
        return self.entries.items()

    def get(self, key: str, default: Any = None):
        return self.entries.get(key, default)


# Values - discriminated union on ``kind``
class Integer(_Frozen):
    kind: TypingLiteral["integer"] = "integer"
    value: int


class Float(_Frozen):
    kind: TypingLiteral["float"] = "float"
    value: float


class String(_Frozen):
    kind: TypingLiteral["string"] = "string"
    value: str


class Identifier(_Frozen):
    """Bare identifier with no matching constant; behaves as a string."""

    kind: TypingLiteral["identifier"] = "identifier"
    name: str


class Array(_Frozen):
    kind: TypingLiteral["array"] = "array"
    items: tuple["Value", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "Value":
        return self.items[index]


class Dictionary(_ReadOnlyEntries):
    """Key -> value mapping; insertion order is the output order."""

    kind: TypingLiteral["dictionary"] = "dictionary"


Value = Annotated[
    Integer | Float | String | Identifier | Array | Dictionary,
    Field(discriminator="kind"),
]


class Document(_ReadOnlyEntries):
    """Top-level bindings of one parsed source, in source order."""


# Rebuild models for forward references
_ReadOnlyEntries.model_rebuild()
Array.model_rebuild()
Dictionary.model_rebuild()
Document.model_rebuild()
