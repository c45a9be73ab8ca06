from dataclasses import dataclass, field

from crossfile_review.core.domain.dependencies.dependency_info import DependencyInfo
from crossfile_review.core.domain.impact.impact_level import ImpactLevel


@dataclass(frozen=True)
class CrossFileImpact:
    changed_file: str
    impact_level: ImpactLevel
    description: str
    affected_files: frozenset[str] = frozenset()
    dependencies: tuple[DependencyInfo, ...] = ()
    breaking_changes: tuple[str, ...] = ()


@dataclass(frozen=True)
class CrossFileAnalysisResult:
    impacts: tuple[CrossFileImpact, ...]
    total_affected_files: frozenset[str]
    summary: str
    has_critical_impact: bool = field(init=False)
    has_breaking_changes: bool = field(init=False)

    def __post_init__(self) -> None:
        critical = any(i.impact_level is ImpactLevel.CRITICAL for i in self.impacts)
        breaking = any(i.breaking_changes for i in self.impacts)
        object.__setattr__(self, "has_critical_impact", critical)
        object.__setattr__(self, "has_breaking_changes", breaking)

    @property
    def breaking_changes(self) -> list[str]:
        return [change for impact in self.impacts for change in impact.breaking_changes]
