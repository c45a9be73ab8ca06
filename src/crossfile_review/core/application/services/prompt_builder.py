from collections import defaultdict

from crossfile_review.core.domain.dependencies import DependencyInfo, SearchHit, UsedDependencyInfo
from crossfile_review.core.domain.diff import LineKind, changed_lines_with_context
from crossfile_review.core.domain.impact import CrossFileAnalysisResult
from crossfile_review.core.domain.review import FileChange, ReviewContext
from crossfile_review.core.domain.symbols import UsedSymbol

MAX_DEPENDENCIES = 10
MAX_FILES_PER_DEPENDENCY = 5
MAX_USAGES_PER_FILE = 3
MAX_USED_DEPENDENCIES = 10
MAX_EXTERNAL_FILES = 5
MAX_SYMBOLS_PER_KIND = 10
MAX_FILES = 15
MAX_LINES_PER_FILE = 50
PROMPT_CONTEXT_LINES = 2

RESPONSE_FORMAT_EXAMPLE = """{
  "line_comments": [
    {
      "file_path": "src/main/kotlin/Example.kt",
      "new_line": 42,
      "severity": "warning",
      "comment": "Specific, actionable review feedback"
    }
  ],
  "summary": "Overall summary"
}"""


class ReviewPromptBuilder:
    """Builds the line-by-line review prompt from the diff and the dependency evidence."""

    @staticmethod
    def build_system_prompt() -> str:
        return (
            "You are a code review assistant. You MUST respond ONLY with valid JSON. "
            "Do not include any explanatory text, comments, or markdown formatting. "
            "Just return the raw JSON object."
        )

    @staticmethod
    def build_line_review_prompt(
        context: ReviewContext,
        dependencies: list[DependencyInfo],
        used_dependencies: list[UsedDependencyInfo],
        analysis: CrossFileAnalysisResult,
    ) -> str:
        """Assemble the user prompt; *analysis* is always the changeset-wide result."""
        sections = [
            _header_section(),
            _merge_request_section(context),
            _dependency_section(dependencies),
            _used_dependency_section(used_dependencies),
            _cross_file_section(analysis),
            _changed_files_section(context.files),
            _response_format_section(),
            _guidelines_section(),
        ]
        return "\n\n".join(section for section in sections if section)


# ── Section helpers ───────────────────────────────────────────────


def _header_section() -> str:
    return (
        "# Code review request\n\n"
        "**CRITICAL: return JSON only. No explanations, comments or markdown.**\n\n"
        "You are an expert code reviewer. Review the following merge request in detail."
    )


def _merge_request_section(context: ReviewContext) -> str:
    text = f"## Merge request\n{context.summary}"
    if context.mr_description and context.mr_description.strip():
        text += f"\n\n## Description\n{context.mr_description}"
    return text


def _dependency_section(dependencies: list[DependencyInfo]) -> str:
    if not dependencies:
        return ""
    lines = ["## Dependency analysis (with real code)", ""]
    for dep in dependencies[:MAX_DEPENDENCIES]:
        lines += [
            f"### {dep.symbol.kind} `{dep.symbol.name}` (changed in: {dep.symbol.file_path})",
            "",
            "**Affected files:**",
            "",
        ]
        by_file: dict[str, list[SearchHit]] = defaultdict(list)
        for hit in dep.usages:
            by_file[hit.path].append(hit)
        for path, hits in list(by_file.items())[:MAX_FILES_PER_DEPENDENCY]:
            lines += _usage_lines(path, hits)
        if len(by_file) > MAX_FILES_PER_DEPENDENCY:
            lines.append(f"... and {len(by_file) - MAX_FILES_PER_DEPENDENCY} more files")
        lines += ["---", ""]
    lines.append(
        "Check that every changed symbol is still used correctly at each call site above, "
        "and point at the exact lines that need updating."
    )
    return "\n".join(lines)


def _usage_lines(path: str, hits: list[SearchHit]) -> list[str]:
    lines = [f"#### {path}"]
    for hit in hits[:MAX_USAGES_PER_FILE]:
        lines += [f"**Line {hit.start_line}:**", "```", hit.data.strip(), "```", ""]
    if len(hits) > MAX_USAGES_PER_FILE:
        lines += [f"... ({len(hits) - MAX_USAGES_PER_FILE} more)", ""]
    return lines


def _used_dependency_section(used_dependencies: list[UsedDependencyInfo]) -> str:
    if not used_dependencies:
        return ""
    lines = [
        "## Backward dependency analysis (external symbols used by the changed files)",
        "",
    ]
    for used in used_dependencies[:MAX_USED_DEPENDENCIES]:
        lines += [f"### {used.source_file}", ""]
        external = sorted(used.external_files)
        if external:
            lines.append("**Depends on:**")
            lines += [f"- {path}" for path in external[:MAX_EXTERNAL_FILES]]
            if len(external) > MAX_EXTERNAL_FILES:
                lines.append(f"- ... and {len(external) - MAX_EXTERNAL_FILES} more files")
            lines.append("")
        lines += _symbols_by_kind(used.used_symbols)
        lines += ["---", ""]
    lines.append(
        "Verify that these external symbols are used correctly, with no compatibility "
        "problems or side effects."
    )
    return "\n".join(lines)


def _symbols_by_kind(symbols: tuple[UsedSymbol, ...]) -> list[str]:
    grouped: dict[str, list[UsedSymbol]] = defaultdict(list)
    for symbol in symbols:
        grouped[symbol.kind.label].append(symbol)
    lines: list[str] = []
    for label, group in grouped.items():
        lines.append(f"**{label}:**")
        for symbol in group[:MAX_SYMBOLS_PER_KIND]:
            where = f" (defined in: {symbol.definition_file})" if symbol.definition_file else ""
            lines.append(f"- `{symbol.name}`{where}")
        if len(group) > MAX_SYMBOLS_PER_KIND:
            lines.append(f"- ... and {len(group) - MAX_SYMBOLS_PER_KIND} more")
        lines.append("")
    return lines


def _cross_file_section(analysis: CrossFileAnalysisResult) -> str:
    text = f"## Cross-file impact\n{analysis.summary}"
    if analysis.has_breaking_changes:
        text += "\n**Breaking changes detected!**"
    return text


def _changed_files_section(files: tuple[FileChange, ...]) -> str:
    lines = ["## Changed files", ""]
    for file in files[:MAX_FILES]:
        lines.append(f"### File: {file.file_path}")
        if file.new_file:
            lines.append("*New file*")
        if file.renamed_file:
            lines.append(f"*Renamed from: {file.old_path}*")
        if file.deleted_file:
            lines.append("*Deleted file*")
        lines.append("")
        lines += _diff_excerpt(file.diff)
        lines.append("")
    return "\n".join(lines)


def _diff_excerpt(diff_text: str) -> list[str]:
    changed = changed_lines_with_context(diff_text, PROMPT_CONTEXT_LINES)
    if not changed:
        return []
    lines = ["Changes (- removed, + added):", "```diff"]
    shown = 0
    for line in changed:
        if shown >= MAX_LINES_PER_FILE:
            break
        if line.kind is LineKind.DELETION:
            lines.append(f"-{line.old_line}: {line.content}")
            shown += 1
        elif line.kind is LineKind.ADDITION:
            lines.append(f"+{line.new_line}: {line.content}")
            shown += 1
        else:
            lines.append(f" {line.new_line}: {line.content}")
    if len(changed) > MAX_LINES_PER_FILE:
        lines.append("... (more changes not shown)")
    lines.append("```")
    return lines


def _response_format_section() -> str:
    return (
        "## Response format (required)\n\n"
        "**Return only this JSON structure, with no other text:**\n\n"
        f"{RESPONSE_FORMAT_EXAMPLE}\n\n"
        "**severity is one of:** critical, warning, suggestion, info\n\n"
        "**Notes:**\n"
        "- file_path must match a file name shown above exactly\n"
        "- new_line must be the line number of a changed or added line (the + numbers)\n"
        "- in the diff, - marks removed lines, + marks added lines, a space marks context"
    )


def _guidelines_section() -> str:
    return (
        "**How to review:**\n"
        "1. **Compare before and after**: read the - and + lines to see what changed.\n"
        "2. **Review the new code itself** for bugs, performance and security problems.\n"
        "3. **Use the dependency evidence** above to judge the blast radius.\n"
        '   - e.g. "UserService.kt:45 still calls `getUser(id)` without the new '
        'includeDeleted parameter."\n'
        '4. **Name the file and line**: "problem Y at XXX.kt:123", never just "please check".\n\n'
        "- Return complete, well-formed JSON."
    )
