"""Recover typed line comments from an unreliable free-text model reply.

Pipeline: locate a JSON candidate (fenced block first, then a string-aware
brace scan), decode it against a schema, repair once if the reply was cut
off mid-stream, then validate each ``line_comments`` entry on its own.
Nothing in here raises; unrecoverable replies yield an empty list.
"""

import re
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, ValidationError

from crossfile_review.core.domain.review import CommentSeverity, LineComment

_FENCED_JSON_RE = re.compile(r"```json\s*\n(.*?)\n```", re.DOTALL)
_CLOSERS = {"{": "}", "[": "]"}
_EOF_MARKER = "EOF while parsing"


class _ReviewReply(BaseModel):
    model_config = ConfigDict(extra="ignore")

    line_comments: list[Any] | None = None
    summary: Any = None


class _LineCommentEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    file_path: StrictStr
    new_line: StrictInt | StrictFloat
    comment: StrictStr
    severity: Any = None

    def to_domain(self) -> LineComment:
        label = self.severity if isinstance(self.severity, str) else None
        return LineComment(
            file_path=self.file_path,
            new_line=int(self.new_line),
            severity=CommentSeverity.from_label(label),
            comment=self.comment,
        )


class ResponseRecoveryParser:
    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger().bind(
            context_component="response_recovery_parser"
        )

    def parse_line_comments(self, reply: str) -> list[LineComment]:
        self._logger.info("Parsing model reply", reply_length=len(reply))
        candidate = extract_json_candidate(reply)
        if candidate is None:
            self._logger.warning("No JSON object found in model reply")
            return []
        decoded = self._decode(candidate)
        if decoded is None:
            return []
        if decoded.line_comments is None:
            self._logger.warning("Model reply has no 'line_comments' array")
            return []
        comments = [c for c in map(self._to_comment, decoded.line_comments) if c is not None]
        self._logger.info(
            "Line comments recovered",
            recovered=len(comments),
            dropped=len(decoded.line_comments) - len(comments),
        )
        return comments

    def _decode(self, candidate: str) -> _ReviewReply | None:
        try:
            return _ReviewReply.model_validate_json(candidate)
        except ValidationError as exc:
            if not _is_truncation(exc):
                self._log_decode_failure(exc)
                return None
        self._logger.warning("Model reply looks truncated; attempting repair")
        repaired = repair_truncated_json(candidate)
        try:
            return _ReviewReply.model_validate_json(repaired)
        except ValidationError as exc:
            self._log_decode_failure(exc, repaired=True)
            return None

    def _to_comment(self, entry: Any) -> LineComment | None:
        try:
            return _LineCommentEntry.model_validate(entry).to_domain()
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            self._logger.warning("Dropping malformed line comment", invalid_fields=fields)
            return None

    def _log_decode_failure(self, exc: ValidationError, repaired: bool = False) -> None:
        self._logger.error(
            "Model reply is not usable JSON",
            repaired=repaired,
            error_type=type(exc).__name__,
            error_details=exc.errors(include_url=False, include_input=False)[:3],
        )


def extract_json_candidate(reply: str) -> str | None:
    """Return the JSON text to decode: a fenced block, else the first brace-balanced object.

    When the braces never balance (a truncated reply), everything from the
    first ``{`` onwards is returned so the repair pass can close it.
    """
    fenced = _FENCED_JSON_RE.search(reply)
    if fenced is not None:
        return fenced.group(1).strip()
    start = reply.find("{")
    if start < 0:
        return None
    end = _matching_brace_end(reply, start)
    return reply[start:end] if end is not None else reply[start:]


def _matching_brace_end(text: str, start: int) -> int | None:
    depth = 0
    in_string = escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            in_string = not in_string
        elif not in_string and char == "{":
            depth += 1
        elif not in_string and char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def repair_truncated_json(text: str) -> str:
    """Close what a cut-off stream left open: a trailing string, then brackets and braces.

    A string value cut mid-content stays open, so the reply fails to decode
    instead of yielding a half-written comment.
    """
    fixed = _close_trailing_string(text.rstrip().removesuffix(","))
    open_stack: list[str] = []
    in_string = escaped = False
    for char in fixed:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = in_string
        elif char == '"':
            in_string = not in_string
        elif not in_string and char in _CLOSERS:
            open_stack.append(char)
        elif not in_string and char in "}]" and open_stack:
            open_stack.pop()
    return fixed + "".join(_CLOSERS[opener] for opener in reversed(open_stack))


def _close_trailing_string(text: str) -> str:
    last_quote = text.rfind('"')
    if last_quote < 0:
        return text
    previous_quote = text.rfind('"', 0, last_quote)
    if previous_quote < 0:
        return text
    tail = text[last_quote + 1 :].strip()
    # A key separator or opener around the last quote means a value was cut.
    if any(char in text[previous_quote + 1 : last_quote] + tail for char in ":{["):
        return text
    if not tail or all(char in ",}]" for char in tail):
        return text
    return text + '"'


def _is_truncation(exc: ValidationError) -> bool:
    return any(
        err["type"] == "json_invalid" and _EOF_MARKER in str(err.get("msg", ""))
        for err in exc.errors(include_url=False)
    )
