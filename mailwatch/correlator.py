"""Correlation store: one MessageRecord per queue id, with DSN aliases.

The MTA refers to one delivery attempt by its queue id and, once a DSN is
generated, by a second DSN id as well. Events for the DSN id are folded into
the record of the original id. Every Delivered/Failed/DsnLink event is emitted
as soon as it is merged; Finalized emits a summary and deletes the record.

Records that never see a Finalized event stay open for the process lifetime.
"""

import logging
from datetime import datetime, timezone

from mailwatch.models import (
    FAILURE,
    Delivered,
    DsnLink,
    Failed,
    Finalized,
    MessageRecord,
    ParsedEvent,
    Unrecognized,
    classify_status,
)
from mailwatch.sink import EventSink

logger = logging.getLogger(__name__)


class CorrelationStore:
    def __init__(self, sink: EventSink, time_func=None):
        self._sink = sink
        self._time_func = time_func or (lambda: datetime.now(timezone.utc))
        self._records: dict[str, MessageRecord] = {}
        # dsn_id -> origin id
        self._aliases: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, message_id: str) -> bool:
        return message_id in self._records

    def get(self, message_id: str) -> MessageRecord | None:
        return self._records.get(message_id)

    @property
    def open_ids(self) -> list[str]:
        return list(self._records)

    def resolve(self, message_id: str) -> str:
        """Map a DSN id back to the id of the record it belongs to."""
        return self._aliases.get(message_id, message_id)

    def _ensure(self, message_id: str) -> MessageRecord:
        record = self._records.get(message_id)
        if record is None:
            record = MessageRecord(id=message_id, first_seen_at=self._time_func())
            self._records[message_id] = record
        return record

    def apply(self, event: ParsedEvent):
        """Merge one parsed event into the store, emitting through the sink."""
        if isinstance(event, (Delivered, Failed)):
            self._on_status(event)
        elif isinstance(event, DsnLink):
            self._on_dsn_link(event)
        elif isinstance(event, Finalized):
            self._on_finalized(event)
        elif isinstance(event, Unrecognized):
            self._sink.unrecognized(event.raw_line)
        else:
            raise TypeError(f"Unknown event type: {type(event).__name__}")

    def _on_status(self, event: Delivered | Failed):
        record = self._ensure(self.resolve(event.id))
        if event.recipient is not None:
            record.recipient = event.recipient
        record.status = event.status
        if event.detail is not None:
            record.detail = event.detail
        self._sink.emit(
            classify_status(event.status),
            record.id,
            recipient=event.recipient,
            status=event.status,
            detail=event.detail,
        )

    def _on_dsn_link(self, event: DsnLink):
        record = self._ensure(self.resolve(event.origin_id))
        if record.dsn_id is not None and record.dsn_id != event.dsn_id:
            self._aliases.pop(record.dsn_id, None)
        record.dsn_id = event.dsn_id
        record.dsn_status = event.dsn_status
        self._aliases[event.dsn_id] = record.id
        self._sink.emit(
            FAILURE,
            record.id,
            recipient=record.recipient,
            dsn_id=event.dsn_id,
            dsn_status=event.dsn_status,
        )

    def _on_finalized(self, event: Finalized):
        message_id = self.resolve(event.id)
        record = self._records.pop(message_id, None)
        if record is None:
            logger.debug("Finalized %s with no open record", event.id)
            return
        if record.dsn_id is not None:
            self._aliases.pop(record.dsn_id, None)
        self._sink.emit(
            record.outcome,
            record.id,
            recipient=record.recipient,
            status=record.status,
            detail=record.detail,
            dsn_id=record.dsn_id,
            dsn_status=record.dsn_status,
        )
