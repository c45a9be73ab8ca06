from enum import StrEnum


class ImpactLevel(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return list(ImpactLevel).index(self)

    @classmethod
    def from_counts(
        cls, affected_file_count: int, usage_count: int, has_public_symbols: bool
    ) -> "ImpactLevel":
        """Thresholds are checked from most to least severe."""
        if affected_file_count >= 10 or usage_count >= 20:
            return cls.CRITICAL
        if affected_file_count >= 5 or (usage_count >= 10 and has_public_symbols):
            return cls.HIGH
        if affected_file_count >= 2 or usage_count >= 5:
            return cls.MEDIUM
        return cls.LOW


class ChangeType(StrEnum):
    ADDED = "added"
    DELETED = "deleted"
    SIGNATURE_MODIFIED = "signature modified"
    UNCHANGED = "unchanged"

    @property
    def is_breaking(self) -> bool:
        return self in (ChangeType.DELETED, ChangeType.SIGNATURE_MODIFIED)

    @classmethod
    def in_diff(cls, diff_text: str, symbol_name: str) -> "ChangeType":
        """Classify how *symbol_name* appears on the added and removed lines of *diff_text*."""
        added = removed = False
        for line in diff_text.split("\n"):
            if symbol_name not in line:
                continue
            if line.startswith("+"):
                added = True
            elif line.startswith("-"):
                removed = True
        if removed:
            return cls.SIGNATURE_MODIFIED if added else cls.DELETED
        return cls.ADDED if added else cls.UNCHANGED
