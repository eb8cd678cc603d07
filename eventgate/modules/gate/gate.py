import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Optional

from ..auth.interfaces import TokenBackend
from ..event.store import EventConfigStore

logger = logging.getLogger(__name__)

CUTOFF_TIME = time(18, 0)


@dataclass
class AccessStatus:
    """Snapshot of the registration window."""
    is_open: bool
    cutoff_at: Optional[datetime]
    now: datetime
    event_date: str


def cutoff_for_event(event_date: str, tz: Optional[tzinfo] = None) -> datetime:
    """
    Registration cutoff: 18:00 on the day before the event.

    Args:
        event_date: Event date as YYYY-MM-DD
        tz: Time zone of the cutoff; server local time when None

    Returns:
        Aware datetime of the cutoff

    Raises:
        ValueError: If the date cannot be parsed
    """
    day_before = date.fromisoformat(event_date) - timedelta(days=1)
    naive = datetime.combine(day_before, CUTOFF_TIME)
    if tz is None:
        # Naive astimezone() applies the system zone rules, DST included
        return naive.astimezone()
    return naive.replace(tzinfo=tz)


class AccessGate:
    def __init__(
        self,
        event_store: EventConfigStore,
        token_backend: TokenBackend,
        tz: Optional[tzinfo] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize access gate.

        Args:
            event_store: Source of the event date
            token_backend: Active token backend (local or remote)
            tz: Time zone for the cutoff, server local time when None
            clock: Returns the current aware datetime; defaults to now in tz
        """
        self.event_store = event_store
        self.token_backend = token_backend
        self.tz = tz
        self.clock = clock

    def _now(self) -> datetime:
        if self.clock is not None:
            return self.clock()
        return datetime.now(self.tz) if self.tz else datetime.now().astimezone()

    async def status(self, now: Optional[datetime] = None) -> AccessStatus:
        """
        Compute whether registration is open.

        A date that cannot be parsed closes registration instead of failing.
        """
        config = await self.event_store.get()
        now = now or self._now()

        try:
            cutoff = cutoff_for_event(config.event_date, self.tz)
        except ValueError as e:
            logger.warning(f"Cannot compute cutoff for event date {config.event_date!r}: {e}")
            return AccessStatus(is_open=False, cutoff_at=None, now=now, event_date=config.event_date)

        return AccessStatus(
            is_open=now <= cutoff,
            cutoff_at=cutoff,
            now=now,
            event_date=config.event_date,
        )

    async def validate_token(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return await self.token_backend.validate(token)
