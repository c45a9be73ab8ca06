"""Forward and backward dependency discovery over a code-search collaborator."""

import asyncio

import structlog

from crossfile_review.core.application.ports import CodeSearchPort
from crossfile_review.core.domain.dependencies import DependencyInfo, SearchHit, UsedDependencyInfo
from crossfile_review.core.domain.review import FileChange
from crossfile_review.core.domain.symbols import (
    Symbol,
    UsedSymbol,
    extract_symbols,
    extract_used_symbols,
)


class DependencyResolver:
    """Looks up every extracted symbol once, with bounded parallelism.

    Lookups run concurrently up to ``max_concurrency`` at a time. Results keep
    symbol order, and a failed lookup only affects its own symbol.
    """

    def __init__(
        self,
        code_search: CodeSearchPort,
        max_concurrency: int = 4,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._code_search = code_search
        self._max_concurrency = max(1, max_concurrency)
        self._logger = logger or structlog.get_logger().bind(
            context_component="dependency_resolver"
        )

    async def find_dependents(
        self, project_id: int, files: list[FileChange], target_branch: str
    ) -> list[DependencyInfo]:
        """Forward analysis: where is each newly defined symbol used elsewhere?"""
        symbols = [symbol for file in files for symbol in extract_symbols(file)]
        self._logger.info(
            "Forward dependency analysis started", files=len(files), symbols=len(symbols)
        )
        gate = asyncio.Semaphore(self._max_concurrency)
        hits_per_symbol = await asyncio.gather(
            *(self._search(gate, project_id, s.name, target_branch) for s in symbols)
        )
        dependencies = [
            dep
            for symbol, hits in zip(symbols, hits_per_symbol, strict=True)
            if (dep := self._to_dependency(symbol, hits)) is not None
        ]
        self._logger.info("Forward dependencies found", dependencies=len(dependencies))
        return dependencies

    async def find_used_dependencies(
        self, project_id: int, files: list[FileChange], target_branch: str
    ) -> list[UsedDependencyInfo]:
        """Backward analysis: where is each symbol used by the new code defined?"""
        self._logger.info("Backward dependency analysis started", files=len(files))
        gate = asyncio.Semaphore(self._max_concurrency)
        results: list[UsedDependencyInfo] = []
        for file in files:
            used = extract_used_symbols(file)
            if not used:
                continue
            hits_per_symbol = await asyncio.gather(
                *(self._search(gate, project_id, u.name, target_branch) for u in used)
            )
            resolved = tuple(
                _resolve(symbol, hits, file.file_path)
                for symbol, hits in zip(used, hits_per_symbol, strict=True)
            )
            results.append(UsedDependencyInfo(file.file_path, resolved))
        self._logger.info("Backward dependencies found", files_with_usages=len(results))
        return results

    async def _search(
        self, gate: asyncio.Semaphore, project_id: int, query: str, ref: str
    ) -> list[SearchHit]:
        async with gate:
            try:
                return await self._code_search.search(project_id, query, ref)
            except Exception as exc:
                self._logger.warning(
                    "Symbol lookup failed; treating as no usage",
                    symbol=query,
                    error_type=type(exc).__name__,
                    error_details=str(exc),
                )
                return []

    def _to_dependency(self, symbol: Symbol, hits: list[SearchHit]) -> DependencyInfo | None:
        external = tuple(hit for hit in hits if hit.path != symbol.file_path)
        if not external:
            return None
        dependency = DependencyInfo(symbol, external)
        self._logger.debug(
            "Symbol used in other files",
            symbol=symbol.name,
            symbol_kind=str(symbol.kind),
            affected_files=len(dependency.affected_files),
        )
        return dependency


def _resolve(symbol: UsedSymbol, hits: list[SearchHit], source_file: str) -> UsedSymbol:
    definition = next((hit.path for hit in hits if hit.path != source_file), None)
    return symbol.resolved_to(definition) if definition is not None else symbol
