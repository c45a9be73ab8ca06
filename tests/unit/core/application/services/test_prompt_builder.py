"""Unit tests for ReviewPromptBuilder section assembly."""

from dataclasses import replace

from builders import make_context, make_file
from crossfile_review.core.application.services import ReviewPromptBuilder
from crossfile_review.core.domain.dependencies import DependencyInfo, SearchHit, UsedDependencyInfo
from crossfile_review.core.domain.impact import CrossFileAnalysisResult, CrossFileImpact, ImpactLevel
from crossfile_review.core.domain.symbols import Symbol, SymbolKind, UsageKind, UsedSymbol

SERVICE = "src/UserService.kt"


def _analysis(breaking: tuple[str, ...] = ()) -> CrossFileAnalysisResult:
    impact = CrossFileImpact(SERVICE, ImpactLevel.HIGH, "desc", breaking_changes=breaking)
    return CrossFileAnalysisResult(
        impacts=(impact,),
        total_affected_files=frozenset(),
        summary="## Cross-file impact analysis\n- High impact: 1",
    )


class TestSystemPrompt:
    def test_demands_json_only(self) -> None:
        assert "ONLY with valid JSON" in ReviewPromptBuilder.build_system_prompt()


class TestLineReviewPrompt:
    def test_minimal_prompt_has_core_sections_in_order(self) -> None:
        context = make_context(make_file(SERVICE, "@@ -1,2 +1,2 @@\n keep\n-old\n+new"))

        prompt = ReviewPromptBuilder.build_line_review_prompt(context, [], [], _analysis())

        order = [
            "# Code review request",
            "## Merge request",
            "## Cross-file impact",
            "## Changed files",
            "## Response format (required)",
            "**How to review:**",
        ]
        positions = [prompt.index(heading) for heading in order]
        assert positions == sorted(positions)
        assert "## Dependency analysis" not in prompt
        assert "## Backward dependency analysis" not in prompt
        assert "Breaking changes detected!" not in prompt

    def test_diff_excerpt_uses_line_numbers_per_side(self) -> None:
        context = make_context(make_file(SERVICE, "@@ -1,2 +1,2 @@\n keep\n-old\n+new"))

        prompt = ReviewPromptBuilder.build_line_review_prompt(context, [], [], _analysis())

        assert "```diff\n 1: keep\n-2: old\n+2: new\n```" in prompt

    def test_long_diffs_are_cut_with_marker(self) -> None:
        added = "\n".join(f"+line {i}" for i in range(60))
        context = make_context(make_file(SERVICE, f"@@ -0,0 +1,60 @@\n{added}"))

        prompt = ReviewPromptBuilder.build_line_review_prompt(context, [], [], _analysis())

        assert "+50: line 49" in prompt
        assert "+51: line 50" not in prompt
        assert "... (more changes not shown)" in prompt

    def test_description_and_file_flags(self) -> None:
        context = make_context(
            make_file("src/New.kt", new_file=True),
            make_file("src/Moved.kt", renamed_file=True),
        )
        context = replace(context, mr_description="Adds lookup")

        prompt = ReviewPromptBuilder.build_line_review_prompt(context, [], [], _analysis())

        assert "## Description\nAdds lookup" in prompt
        assert "### File: src/New.kt\n*New file*" in prompt
        assert "*Renamed from: src/Moved.kt*" in prompt

    def test_dependency_evidence_and_breaking_flag(self) -> None:
        symbol = Symbol("getUser", SymbolKind.FUNCTION, SERVICE)
        hits = tuple(
            SearchHit(path="src/Api.kt", data=f"getUser({i})", start_line=i) for i in range(5)
        )
        used = UsedDependencyInfo(
            "src/Api.kt",
            (UsedSymbol("loadUser", UsageKind.FUNCTION_CALL, 1, definition_file=SERVICE),),
        )
        context = make_context(make_file(SERVICE))

        prompt = ReviewPromptBuilder.build_line_review_prompt(
            context,
            [DependencyInfo(symbol, hits)],
            [used],
            _analysis(breaking=("FUNCTION 'getUser' signature modified",)),
        )

        assert f"### FUNCTION `getUser` (changed in: {SERVICE})" in prompt
        assert "#### src/Api.kt" in prompt
        assert "**Line 2:**\n```\ngetUser(2)\n```" in prompt
        assert "getUser(3)" not in prompt
        assert "... (2 more)" in prompt
        assert f"**Depends on:**\n- {SERVICE}" in prompt
        assert f"**Function calls:**\n- `loadUser` (defined in: {SERVICE})" in prompt
        assert "**Breaking changes detected!**" in prompt
