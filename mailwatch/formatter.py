"""Canonical single-line outcome format.

    SUCESSO | ID: A1 | Para: x@y.com | Status: Sent | Resposta: 250 OK
    FALHA | ID: A1 | Para: x@y.com | DSN: B1 | Status DSN: 5.1.1

Segments whose value was never set are left out.
"""

SEPARATOR = " | "


def format_outcome(
    outcome: str,
    message_id: str,
    recipient: str | None = None,
    status: str | None = None,
    detail: str | None = None,
    dsn_id: str | None = None,
    dsn_status: str | None = None,
) -> str:
    parts = [outcome, f"ID: {message_id}"]
    for label, value in (
        ("Para", recipient),
        ("Status", status),
        ("Resposta", detail),
        ("DSN", dsn_id),
        ("Status DSN", dsn_status),
    ):
        if value:
            parts.append(f"{label}: {value}")
    return SEPARATOR.join(parts)
