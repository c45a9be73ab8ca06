from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReviewConfig:
    """Tunables for the review pipeline, resolved from settings by the container."""

    max_files: int = 50
    max_file_size: int = 1_048_576
    skip_deleted_files: bool = True
    excluded_extensions: tuple[str, ...] = field(default_factory=tuple)
    excluded_paths: tuple[str, ...] = field(default_factory=tuple)
    line_by_line_enabled: bool = True
    chunking_enabled: bool = False
    files_per_chunk: int = 5
