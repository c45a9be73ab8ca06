from dataclasses import dataclass


@dataclass(frozen=True)
class FileChange:
    """One file of a merge request changeset, with its raw unified diff."""

    file_path: str
    diff: str
    old_path: str = ""
    new_file: bool = False
    deleted_file: bool = False
    renamed_file: bool = False

    @property
    def extension(self) -> str:
        name = self.file_path.rsplit("/", 1)[-1]
        return name.rsplit(".", 1)[-1] if "." in name else ""

    @property
    def file_size(self) -> int:
        return len(self.diff)

    @property
    def source_path(self) -> str:
        """Path on the base side of the diff; equals file_path unless renamed."""
        return self.old_path or self.file_path


@dataclass(frozen=True)
class DiffRefs:
    base_sha: str
    start_sha: str
    head_sha: str
