from crossfile_review.core.domain.impact.cross_file_impact import (
    CrossFileAnalysisResult,
    CrossFileImpact,
)
from crossfile_review.core.domain.impact.impact_classifier import ImpactClassifier
from crossfile_review.core.domain.impact.impact_level import ChangeType, ImpactLevel

__all__ = [
    "ChangeType",
    "CrossFileAnalysisResult",
    "CrossFileImpact",
    "ImpactClassifier",
    "ImpactLevel",
]
