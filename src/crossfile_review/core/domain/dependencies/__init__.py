from crossfile_review.core.domain.dependencies.dependency_info import (
    DependencyInfo,
    UsedDependencyInfo,
)
from crossfile_review.core.domain.dependencies.search_hit import SearchHit

__all__ = ["DependencyInfo", "SearchHit", "UsedDependencyInfo"]
