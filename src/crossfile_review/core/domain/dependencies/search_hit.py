from dataclasses import dataclass


@dataclass(frozen=True)
class SearchHit:
    """One code-search match: a file path, the matched snippet and its first line."""

    path: str
    data: str = ""
    start_line: int = 0
    basename: str = ""
    filename: str = ""
    ref: str = ""
    project_id: int | None = None
