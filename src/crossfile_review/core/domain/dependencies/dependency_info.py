from dataclasses import dataclass, field

from crossfile_review.core.domain.dependencies.search_hit import SearchHit
from crossfile_review.core.domain.symbols.symbol import Symbol, UsedSymbol


@dataclass(frozen=True)
class DependencyInfo:
    """A changed symbol and the external locations that reference it."""

    symbol: Symbol
    usages: tuple[SearchHit, ...]
    affected_files: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        external = frozenset(hit.path for hit in self.usages if hit.path != self.symbol.file_path)
        object.__setattr__(self, "affected_files", external)

    @property
    def usage_count(self) -> int:
        return len(self.usages)

    @property
    def has_external_usages(self) -> bool:
        return bool(self.affected_files)

    def touches(self, file_paths: set[str] | frozenset[str]) -> bool:
        """True if the symbol lives in, or is used by, any of *file_paths*."""
        return self.symbol.file_path in file_paths or not self.affected_files.isdisjoint(file_paths)


@dataclass(frozen=True)
class UsedDependencyInfo:
    """A changed file, the symbols it references, and the files those resolve to."""

    source_file: str
    used_symbols: tuple[UsedSymbol, ...]
    external_files: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        resolved = frozenset(
            s.definition_file for s in self.used_symbols if s.definition_file is not None
        )
        object.__setattr__(self, "external_files", resolved)
