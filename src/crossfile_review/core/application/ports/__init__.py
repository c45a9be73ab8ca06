from crossfile_review.core.application.ports.code_search_port import CodeSearchPort
from crossfile_review.core.application.ports.merge_request_port import MergeRequestPort
from crossfile_review.core.application.ports.notifier_port import NotifierPort
from crossfile_review.core.application.ports.review_model_port import ReviewModelPort

__all__ = ["CodeSearchPort", "MergeRequestPort", "NotifierPort", "ReviewModelPort"]
