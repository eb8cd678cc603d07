"""Time helpers shared by the gate, token backends and API models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def format_rfc3339(value: datetime) -> str:
    """Format an aware datetime with second precision; UTC is written as 'Z'."""
    text = value.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp.

    Raises:
        ValueError: If the text is not a datetime or carries no offset
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {value}")
    return parsed
