"""Regex-based classifier for Sendmail and Postfix mail log lines.

Rules are tried in order and the first match wins:
  1. id + recipient + status   (stat=/status= with to=<...>)
  2. id + recipient + Sendmail failure text after dsn=4.x.x/5.x.x
     (e.g. "dsn=5.1.1, stat=User unknown")
  3. DSN linkage               (<origin>: <dsn>: DSN: <status>)
  4. id + status, no recipient
  5. finalization              (removed / Saved message in / queued for delivery)
  6. Unrecognized

Rule 1 must come before rule 4, which would otherwise match the same line and
drop the recipient. A Sendmail stat= text outside the known tokens is only
taken as a failure when a 4xx/5xx dsn= code precedes it.
"""

import re
from typing import Callable

from mailwatch.models import (
    SUCCESS,
    Delivered,
    DsnLink,
    Failed,
    Finalized,
    ParsedEvent,
    Unrecognized,
    classify_status,
)

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

# Queue id preceded by start of line or whitespace, e.g. "sm-mta[1]: A1: ..."
_ID = r"(?:^|\s)(?P<id>[A-Za-z0-9]+): "

# Recipient field directly after the id
_RECIPIENT = r"to=<?(?P<recipient>[^<>,\s]+)>?,"

# "key=value," fields between the id and the status token. Keeps a syslog
# tag without [pid] ("postfix: ABC: stat=...") from being taken as the id.
_FIELDS = r"(?:[\w-]+=[^,]*,\s*)*?"

# "sent" takes trailing qualifiers; failures are a closed set
_STATUS = r"\b(?:stat|status)=(?P<status>sent\w*|deferred|bounced|rejected|error|expired)\b"

# Detail either wrapped in parentheses or after a colon
_DETAIL = r"(?:\s*\((?P<paren>.*)\)|:?\s*(?P<plain>.*?))\s*$"

_RECIPIENT_STATUS_RE = re.compile(
    _ID
    + _RECIPIENT
    + r".*?"
    + _STATUS
    + _DETAIL,
    re.IGNORECASE,
)

_DSN_FAILURE_RE = re.compile(
    _ID
    + _RECIPIENT
    + r".*?\bdsn=[45]\.\d+\.\d+,\s*stat=(?P<status>[^():]*[^():\s])"
    + r"(?:\s*\((?P<paren>.*)\)|:\s*(?P<plain>.*?))?\s*$",
    re.IGNORECASE,
)

_DSN_LINK_RE = re.compile(
    r"(?:^|\s)(?P<origin>[A-Za-z0-9]+): (?P<dsn>[A-Za-z0-9]+): DSN: (?P<dsn_status>.+?)\s*$"
)

_STATUS_ONLY_RE = re.compile(
    _ID + _FIELDS + _STATUS + _DETAIL,
    re.IGNORECASE,
)

_FINALIZED_RE = re.compile(
    _ID + r"(?:removed\s*$|saved message in\b|.*\bqueued for delivery\b)",
    re.IGNORECASE,
)

# ---------------------------------------------------------------------------
# Event constructors
# ---------------------------------------------------------------------------


def _detail(m: re.Match) -> str | None:
    text = m.group("paren")
    if text is None:
        text = m.group("plain")
    text = (text or "").strip()
    return text or None


def _status_event(m: re.Match, recipient: str | None) -> ParsedEvent:
    status = m.group("status")
    if classify_status(status) == SUCCESS:
        return Delivered(id=m.group("id"), recipient=recipient, status=status, detail=_detail(m))
    return Failed(id=m.group("id"), status=status, recipient=recipient, detail=_detail(m))


def _build_recipient_status(m: re.Match) -> ParsedEvent:
    return _status_event(m, m.group("recipient"))


def _build_dsn_link(m: re.Match) -> ParsedEvent:
    return DsnLink(origin_id=m.group("origin"), dsn_id=m.group("dsn"), dsn_status=m.group("dsn_status"))


def _build_status_only(m: re.Match) -> ParsedEvent:
    return _status_event(m, None)


def _build_finalized(m: re.Match) -> ParsedEvent:
    return Finalized(id=m.group("id"))


RULES: list[tuple[str, re.Pattern, Callable[[re.Match], ParsedEvent]]] = [
    ("recipient_status", _RECIPIENT_STATUS_RE, _build_recipient_status),
    ("dsn_failure", _DSN_FAILURE_RE, _build_recipient_status),
    ("dsn_link", _DSN_LINK_RE, _build_dsn_link),
    ("status_only", _STATUS_ONLY_RE, _build_status_only),
    ("finalized", _FINALIZED_RE, _build_finalized),
]

# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def parse_line(line: str) -> ParsedEvent:
    """Classify a single mail log line.

    Returns Unrecognized for anything no rule matches; that is not an error.
    """
    stripped = line.strip()
    for _, pattern, build in RULES:
        m = pattern.search(stripped)
        if m:
            return build(m)
    return Unrecognized(raw_line=line)
