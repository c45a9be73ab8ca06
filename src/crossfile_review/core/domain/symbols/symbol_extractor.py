"""Extract defined and used symbols from the added lines of a file's diff."""

from collections.abc import Iterator
from typing import TypeVar

from crossfile_review.core.domain.review.file_change import FileChange
from crossfile_review.core.domain.symbols.recognizers import recognizer_for
from crossfile_review.core.domain.symbols.symbol import Symbol, UsedSymbol

_COMMENT_OPENERS = ("//", "/*")

S = TypeVar("S", Symbol, UsedSymbol)


def extract_symbols(file: FileChange) -> list[Symbol]:
    """Symbols defined by *file*'s added lines, unique by name (first match wins)."""
    recognizer = recognizer_for(file.extension)
    if file.deleted_file or recognizer is None:
        return []
    symbols: list[Symbol] = []
    for _, content in _added_code_lines(file.diff):
        symbols.extend(recognizer.definitions(content, file.file_path))
    return _first_by_name(symbols)


def extract_used_symbols(file: FileChange) -> list[UsedSymbol]:
    """Symbols referenced by *file*'s added lines, tagged with their added-line offset."""
    recognizer = recognizer_for(file.extension)
    if file.deleted_file or recognizer is None:
        return []
    used: list[UsedSymbol] = []
    for offset, content in _added_code_lines(file.diff):
        used.extend(recognizer.usages(content, offset))
    return _first_by_name(used)


def _added_code_lines(diff_text: str) -> Iterator[tuple[int, str]]:
    """Yield (running added-line offset, trimmed content) for non-blank, non-comment additions."""
    offset = 0
    for line in diff_text.split("\n"):
        if not line.startswith("+"):
            continue
        offset += 1
        content = line[1:].strip()
        if not content or content.startswith(_COMMENT_OPENERS):
            continue
        yield offset, content


def _first_by_name(items: list[S]) -> list[S]:
    unique: dict[str, S] = {}
    for item in items:
        unique.setdefault(item.name, item)
    return list(unique.values())
