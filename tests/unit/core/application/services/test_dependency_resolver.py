"""Unit tests for DependencyResolver (code search mocked)."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from crossfile_review.core.application.exceptions import ProviderError
from crossfile_review.core.application.services import DependencyResolver
from crossfile_review.core.domain.dependencies import SearchHit
from crossfile_review.core.domain.review import FileChange

SERVICE = "src/UserService.kt"
API = "src/UserApi.kt"


# ── Fixtures ──────────────────────────────────────────────────────


@pytest.fixture()
def mock_search() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def resolver(mock_search: AsyncMock) -> DependencyResolver:
    return DependencyResolver(mock_search, max_concurrency=2)


@pytest.fixture()
def service_file() -> FileChange:
    return FileChange(
        file_path=SERVICE,
        diff="@@ -0,0 +1,2 @@\n+fun getUser(id: Long) = repo.load(id)\n+fun deleteUser(id: Long) {",
    )


# ── Forward analysis ──────────────────────────────────────────────


class TestFindDependents:
    @pytest.mark.asyncio
    async def test_keeps_only_external_hits(
        self, resolver: DependencyResolver, mock_search: AsyncMock, service_file: FileChange
    ) -> None:
        mock_search.search.side_effect = lambda _pid, query, _ref: {
            "getUser": [SearchHit(path=SERVICE), SearchHit(path=API, data="getUser(1)")],
            "deleteUser": [SearchHit(path=SERVICE)],
        }[query]

        deps = await resolver.find_dependents(7, [service_file], "main")

        assert [d.symbol.name for d in deps] == ["getUser"]
        assert deps[0].usages == (SearchHit(path=API, data="getUser(1)"),)
        assert deps[0].affected_files == {API}
        mock_search.search.assert_any_await(7, "getUser", "main")

    @pytest.mark.asyncio
    async def test_failed_lookup_only_drops_its_symbol(
        self, resolver: DependencyResolver, mock_search: AsyncMock, service_file: FileChange
    ) -> None:
        async def search(_pid: int, query: str, _ref: str) -> list[SearchHit]:
            if query == "getUser":
                raise ProviderError("gitlab", "search timed out", retryable=True)
            return [SearchHit(path=API)]

        mock_search.search.side_effect = search

        deps = await resolver.find_dependents(7, [service_file], "main")

        assert [d.symbol.name for d in deps] == ["deleteUser"]

    @pytest.mark.asyncio
    async def test_results_follow_symbol_order_despite_completion_order(
        self, mock_search: AsyncMock, service_file: FileChange
    ) -> None:
        async def search(_pid: int, query: str, _ref: str) -> list[SearchHit]:
            await asyncio.sleep(0.02 if query == "getUser" else 0)
            return [SearchHit(path=API)]

        mock_search.search.side_effect = search
        resolver = DependencyResolver(mock_search, max_concurrency=4)

        deps = await resolver.find_dependents(7, [service_file], "main")

        assert [d.symbol.name for d in deps] == ["getUser", "deleteUser"]

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, mock_search: AsyncMock) -> None:
        active = peak = 0

        async def search(_pid: int, _query: str, _ref: str) -> list[SearchHit]:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return []

        mock_search.search.side_effect = search
        lines = "\n".join(f"+fun f{i}() = {i}" for i in range(6))
        file = FileChange(file_path=SERVICE, diff=f"@@ -0,0 +1,6 @@\n{lines}")

        await DependencyResolver(mock_search, max_concurrency=2).find_dependents(7, [file], "main")

        assert mock_search.search.await_count == 6
        assert peak <= 2


# ── Backward analysis ─────────────────────────────────────────────


class TestFindUsedDependencies:
    @pytest.mark.asyncio
    async def test_resolves_first_external_definition(
        self, resolver: DependencyResolver, mock_search: AsyncMock
    ) -> None:
        file = FileChange(file_path=API, diff="@@ -0,0 +1,1 @@\n+val user = loadUser(id)")
        mock_search.search.return_value = [
            SearchHit(path=API),
            SearchHit(path=SERVICE),
            SearchHit(path="src/Other.kt"),
        ]

        used = await resolver.find_used_dependencies(7, [file], "main")

        assert len(used) == 1
        assert used[0].source_file == API
        assert used[0].used_symbols[0].definition_file == SERVICE
        assert used[0].external_files == {SERVICE}

    @pytest.mark.asyncio
    async def test_unresolved_symbols_are_kept(
        self, resolver: DependencyResolver, mock_search: AsyncMock
    ) -> None:
        file = FileChange(file_path=API, diff="@@ -0,0 +1,1 @@\n+render(page)")
        mock_search.search.side_effect = ProviderError("gitlab", "boom")

        used = await resolver.find_used_dependencies(7, [file], "main")

        assert used[0].used_symbols[0].name == "render"
        assert used[0].used_symbols[0].definition_file is None
        assert used[0].external_files == frozenset()

    @pytest.mark.asyncio
    async def test_files_without_usages_are_skipped(
        self, resolver: DependencyResolver, mock_search: AsyncMock
    ) -> None:
        file = FileChange(file_path="README.md", diff="@@ -0,0 +1,1 @@\n+call(x)")

        assert await resolver.find_used_dependencies(7, [file], "main") == []
        mock_search.search.assert_not_awaited()
