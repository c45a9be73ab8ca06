import pytest

from builders import DIFF_REFS
from crossfile_review.core.domain.review import DiffRefs


@pytest.fixture()
def diff_refs() -> DiffRefs:
    return DIFF_REFS
