"""Per-file impact classification and breaking-change detection."""

from collections import defaultdict

import structlog

from crossfile_review.core.domain.dependencies.dependency_info import DependencyInfo
from crossfile_review.core.domain.impact.cross_file_impact import (
    CrossFileAnalysisResult,
    CrossFileImpact,
)
from crossfile_review.core.domain.impact.impact_level import ChangeType, ImpactLevel
from crossfile_review.core.domain.review.file_change import FileChange

INDEPENDENT_CHANGE = "Independent change with no impact on other files."


class ImpactClassifier:
    """Turns global dependency records into one impact verdict per changed file."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger().bind(context_component="impact_classifier")

    def classify(
        self, changed_files: list[FileChange], dependencies: list[DependencyInfo]
    ) -> CrossFileAnalysisResult:
        self._logger.info("Classifying cross-file impact", changed_files=len(changed_files))
        by_file: dict[str, list[DependencyInfo]] = defaultdict(list)
        for dep in dependencies:
            by_file[dep.symbol.file_path].append(dep)

        impacts: list[CrossFileImpact] = []
        for file in changed_files:
            impact = self._classify_file(file, by_file.get(file.file_path, []))
            if impact is not None:
                impacts.append(impact)

        total_affected = frozenset().union(*(i.affected_files for i in impacts))
        result = CrossFileAnalysisResult(
            impacts=tuple(impacts),
            total_affected_files=total_affected,
            summary=build_summary(impacts, len(total_affected)),
        )
        self._logger.info(
            "Cross-file impact classified",
            impacts=len(impacts),
            affected_files=len(total_affected),
            has_breaking_changes=result.has_breaking_changes,
        )
        return result

    def _classify_file(
        self, file: FileChange, deps: list[DependencyInfo]
    ) -> CrossFileImpact | None:
        if file.deleted_file:
            return _deleted_file_impact(file, deps) if deps else None
        if not deps:
            return CrossFileImpact(file.file_path, ImpactLevel.LOW, INDEPENDENT_CHANGE)

        affected = frozenset().union(*(d.affected_files for d in deps))
        usages = sum(d.usage_count for d in deps)
        public_count = sum(1 for d in deps if d.symbol.is_public)
        level = ImpactLevel.from_counts(len(affected), usages, public_count > 0)
        breaking = tuple(_breaking_changes(file.diff, deps))
        return CrossFileImpact(
            changed_file=file.file_path,
            impact_level=level,
            description=_describe(len(affected), usages, public_count, bool(breaking)),
            affected_files=affected,
            dependencies=tuple(deps),
            breaking_changes=breaking,
        )


def _deleted_file_impact(file: FileChange, deps: list[DependencyInfo]) -> CrossFileImpact:
    affected = frozenset().union(*(d.affected_files for d in deps))
    return CrossFileImpact(
        changed_file=file.file_path,
        impact_level=ImpactLevel.CRITICAL,
        description=f"File was deleted but is still used by {len(affected)} other files.",
        affected_files=affected,
        dependencies=tuple(deps),
        breaking_changes=(f"File deleted with {len(deps)} dependent symbols",),
    )


def _breaking_changes(diff_text: str, deps: list[DependencyInfo]) -> list[str]:
    changes: list[str] = []
    for dep in deps:
        if not (dep.has_external_usages and dep.symbol.is_public):
            continue
        change_type = ChangeType.in_diff(diff_text, dep.symbol.name)
        if change_type.is_breaking:
            changes.append(f"{dep.symbol.kind} '{dep.symbol.name}' {change_type}")
    return changes


def _describe(affected: int, usages: int, public_symbols: int, breaking: bool) -> str:
    parts: list[str] = []
    if affected > 0:
        total = f" ({usages} usages in total)" if usages > affected else ""
        parts.append(f"This change affects {affected} other files{total}.")
    if public_symbols > 0:
        parts.append(f"{public_symbols} public symbols changed.")
    if breaking:
        parts.append("Breaking change detected!")
    return " ".join(parts)


def build_summary(impacts: list[CrossFileImpact], total_affected_files: int) -> str:
    critical = sum(1 for i in impacts if i.impact_level is ImpactLevel.CRITICAL)
    high = sum(1 for i in impacts if i.impact_level is ImpactLevel.HIGH)
    breaking = [change for i in impacts for change in i.breaking_changes]

    lines = [
        "## Cross-file impact analysis",
        "",
        f"{len(impacts)} changed files, {total_affected_files} files affected",
        "",
    ]
    if critical:
        lines.append(f"- Critical impact: {critical}")
    if high:
        lines.append(f"- High impact: {high}")
    if breaking:
        lines += ["", "### Breaking changes detected:"]
        lines += [f"- {change}" for change in breaking]
    return "\n".join(lines) + "\n"
