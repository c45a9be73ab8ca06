"""Line-oriented symbol recognizers, one variant per source dialect.

Each recognizer owns an ordered list of definition rules and usage rules.
A line may match several rules and contribute several symbols. Adding a
dialect means adding a subclass and registering it in ``_RECOGNIZERS``.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from crossfile_review.core.domain.symbols.symbol import Symbol, SymbolKind, UsageKind, UsedSymbol

_PUBLIC_VISIBILITIES = frozenset({"", "public"})


@dataclass(frozen=True)
class DefinitionRule:
    """A definition pattern whose group 1 is always the visibility modifier."""

    pattern: re.Pattern[str]
    kind: SymbolKind
    name_group: int
    is_constant: Callable[[re.Match[str]], bool] | None = None
    rejects: Callable[[str, str], bool] | None = None

    def apply(self, content: str, file_path: str) -> Symbol | None:
        match = self.pattern.search(content)
        if match is None:
            return None
        name = match.group(self.name_group)
        if self.rejects is not None and self.rejects(content, name):
            return None
        kind = SymbolKind.CONSTANT if self.is_constant and self.is_constant(match) else self.kind
        visibility = (match.group(1) or "").strip()
        return Symbol(name, kind, file_path, is_public=visibility in _PUBLIC_VISIBILITIES)


@dataclass(frozen=True)
class UsageRule:
    pattern: re.Pattern[str]
    kind: UsageKind
    name_group: int = 1
    all_matches: bool = True
    skip_reserved: bool = False

    def apply(self, content: str, line_number: int, reserved: frozenset[str]) -> list[UsedSymbol]:
        if self.all_matches:
            matches = list(self.pattern.finditer(content))
        else:
            single = self.pattern.search(content)
            matches = [single] if single else []
        names = (m.group(self.name_group) for m in matches)
        return [
            UsedSymbol(name, self.kind, line_number)
            for name in names
            if not (self.skip_reserved and name in reserved)
        ]


class DialectRecognizer(ABC):
    """Recognizes defined and used symbols on a single source line."""

    extensions: frozenset[str] = frozenset()
    reserved_words: frozenset[str] = frozenset()

    @property
    @abstractmethod
    def definition_rules(self) -> tuple[DefinitionRule, ...]:
        """Ordered definition rules applied to every candidate line."""

    @property
    @abstractmethod
    def usage_rules(self) -> tuple[UsageRule, ...]:
        """Ordered usage rules applied to every candidate line."""

    def definitions(self, content: str, file_path: str) -> list[Symbol]:
        found = (rule.apply(content, file_path) for rule in self.definition_rules)
        return [symbol for symbol in found if symbol is not None]

    def usages(self, content: str, line_number: int) -> list[UsedSymbol]:
        used: list[UsedSymbol] = []
        for rule in self.usage_rules:
            used.extend(rule.apply(content, line_number, self.reserved_words))
        return used


_IMPORT_RULE = UsageRule(
    re.compile(r"^import\s+([a-zA-Z0-9_.]+)\.(\w+)"),
    UsageKind.IMPORT,
    name_group=2,
    all_matches=False,
)
_CALL_RULE = UsageRule(re.compile(r"([a-z]\w+)\s*\("), UsageKind.FUNCTION_CALL, skip_reserved=True)
_MEMBER_RULE = UsageRule(re.compile(r"\.(\w+)"), UsageKind.PROPERTY_ACCESS, skip_reserved=True)


class KotlinRecognizer(DialectRecognizer):
    extensions = frozenset({"kt"})
    reserved_words = frozenset(
        {
            "if", "else", "when", "for", "while", "do", "return", "break", "continue",
            "this", "super", "true", "false", "null", "is", "in", "as", "val", "var",
            "fun", "class", "object", "interface", "package", "import", "throw", "try",
            "catch", "finally", "get", "set", "let", "run", "apply", "also", "with",
        }
    )  # fmt: skip

    _VIS = r"(public |private |protected |internal )?"
    _DEFINITIONS = (
        DefinitionRule(
            re.compile(_VIS + r"(suspend )?(inline )?(fun)\s+(<[^>]+>)?\s*(\w+)\s*\("),
            SymbolKind.FUNCTION,
            name_group=6,
        ),
        DefinitionRule(
            re.compile(_VIS + r"(data\s+class)\s+(\w+)"), SymbolKind.DATA_CLASS, name_group=3
        ),
        DefinitionRule(
            re.compile(_VIS + r"(abstract |open |sealed )?(class)\s+(\w+)"),
            SymbolKind.CLASS,
            name_group=4,
        ),
        DefinitionRule(re.compile(_VIS + r"(interface)\s+(\w+)"), SymbolKind.INTERFACE, 3),
        DefinitionRule(re.compile(_VIS + r"(object)\s+(\w+)"), SymbolKind.OBJECT, 3),
        DefinitionRule(
            re.compile(_VIS + r"(val|var|const\s+val)\s+(\w+)\s*[:=]"),
            SymbolKind.PROPERTY,
            name_group=3,
            is_constant=lambda m: "const" in m.group(2),
        ),
    )
    _USAGES = (
        _IMPORT_RULE,
        UsageRule(re.compile(r"([A-Z]\w+)\s*\("), UsageKind.CLASS_USAGE),
        _CALL_RULE,
        _MEMBER_RULE,
    )

    @property
    def definition_rules(self) -> tuple[DefinitionRule, ...]:
        return self._DEFINITIONS

    @property
    def usage_rules(self) -> tuple[UsageRule, ...]:
        return self._USAGES


class JavaRecognizer(DialectRecognizer):
    extensions = frozenset({"java"})
    reserved_words = frozenset(
        {
            "if", "else", "switch", "case", "for", "while", "do", "return", "break",
            "continue", "this", "super", "true", "false", "null", "instanceof", "new",
            "throw", "try", "catch", "finally", "class", "interface", "extends",
            "implements", "package", "import",
        }
    )  # fmt: skip

    _VIS = r"(public |private |protected )?"
    _DEFINITIONS = (
        DefinitionRule(
            re.compile(_VIS + r"(static )?(final )?(abstract )?(class)\s+(\w+)"),
            SymbolKind.CLASS,
            name_group=6,
        ),
        DefinitionRule(re.compile(_VIS + r"(interface)\s+(\w+)"), SymbolKind.INTERFACE, 3),
        # Enums are reported as classes.
        DefinitionRule(re.compile(_VIS + r"(enum)\s+(\w+)"), SymbolKind.CLASS, 3),
        DefinitionRule(
            re.compile(_VIS + r"(static )?(final )?(synchronized )?(\w+(<[^>]+>)?)\s+(\w+)\s*\("),
            SymbolKind.FUNCTION,
            name_group=7,
            rejects=lambda content, name: f"class {name}" in content,
        ),
        DefinitionRule(
            re.compile(_VIS + r"(static )?(final )?(\w+(<[^>]+>)?)\s+(\w+)\s*[=;]"),
            SymbolKind.PROPERTY,
            name_group=6,
            is_constant=lambda m: bool(m.group(2)) and bool(m.group(3)),
            rejects=lambda content, _name: "class " in content or "interface " in content,
        ),
    )
    _USAGES = (
        _IMPORT_RULE,
        UsageRule(re.compile(r"new\s+([A-Z]\w+)\s*\("), UsageKind.CLASS_USAGE),
        _CALL_RULE,
        _MEMBER_RULE,
    )

    @property
    def definition_rules(self) -> tuple[DefinitionRule, ...]:
        return self._DEFINITIONS

    @property
    def usage_rules(self) -> tuple[UsageRule, ...]:
        return self._USAGES


_RECOGNIZERS: dict[str, DialectRecognizer] = {
    extension: recognizer
    for recognizer in (KotlinRecognizer(), JavaRecognizer())
    for extension in recognizer.extensions
}


def recognizer_for(extension: str) -> DialectRecognizer | None:
    """Return the recognizer registered for a file extension, if any."""
    return _RECOGNIZERS.get(extension.lower())
