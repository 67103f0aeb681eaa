"""Parse events and correlated message records for the mail log pipeline."""

from dataclasses import dataclass
from datetime import datetime

# Outcome labels, as written to the channels and used as counter keys
SUCCESS = "SUCESSO"
FAILURE = "FALHA"
UNDEFINED = "INDEFINIDO"

OUTCOMES = (SUCCESS, FAILURE, UNDEFINED)


def classify_status(token: str | None) -> str:
    """Map an MTA status token to an outcome. MTAs append qualifiers to 'sent'."""
    if token is None:
        return UNDEFINED
    if token.lower().startswith("sent"):
        return SUCCESS
    return FAILURE


@dataclass(frozen=True)
class Delivered:
    id: str
    recipient: str | None = None
    status: str = "Sent"
    detail: str | None = None


@dataclass(frozen=True)
class Failed:
    id: str
    status: str
    recipient: str | None = None
    detail: str | None = None


@dataclass(frozen=True)
class DsnLink:
    origin_id: str
    dsn_id: str
    dsn_status: str


@dataclass(frozen=True)
class Finalized:
    id: str


@dataclass(frozen=True)
class Unrecognized:
    raw_line: str


ParsedEvent = Delivered | Failed | DsnLink | Finalized | Unrecognized


@dataclass
class MessageRecord:
    id: str
    first_seen_at: datetime
    recipient: str | None = None
    status: str | None = None
    detail: str | None = None
    dsn_id: str | None = None
    dsn_status: str | None = None

    @property
    def outcome(self) -> str:
        """Outcome of the record as a whole: a DSN link without a status means failure."""
        if self.status is None and self.dsn_id is not None:
            return FAILURE
        return classify_status(self.status)
