from dataclasses import dataclass, replace
from enum import StrEnum


class SymbolKind(StrEnum):
    FUNCTION = "FUNCTION"
    CLASS = "CLASS"
    INTERFACE = "INTERFACE"
    DATA_CLASS = "DATA_CLASS"
    OBJECT = "OBJECT"
    PROPERTY = "PROPERTY"
    CONSTANT = "CONSTANT"


class UsageKind(StrEnum):
    FUNCTION_CALL = "FUNCTION_CALL"
    CLASS_USAGE = "CLASS_USAGE"
    PROPERTY_ACCESS = "PROPERTY_ACCESS"
    IMPORT = "IMPORT"

    @property
    def label(self) -> str:
        return _USAGE_LABELS[self]


_USAGE_LABELS = {
    UsageKind.FUNCTION_CALL: "Function calls",
    UsageKind.CLASS_USAGE: "Class usages",
    UsageKind.PROPERTY_ACCESS: "Property access",
    UsageKind.IMPORT: "Imports",
}


@dataclass(frozen=True)
class Symbol:
    """A symbol defined by the added lines of a changed file."""

    name: str
    kind: SymbolKind
    file_path: str
    is_public: bool = True


@dataclass(frozen=True)
class UsedSymbol:
    """A symbol referenced by the added lines of a changed file."""

    name: str
    kind: UsageKind
    line_number: int
    definition_file: str | None = None

    def resolved_to(self, definition_file: str) -> "UsedSymbol":
        return replace(self, definition_file=definition_file)
