import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from ...errors import PersistenceError, ValidationError
from ..api.models import DEFAULT_EVENT_CONFIG, EventConfig
from ..clock import format_rfc3339, utcnow
from .locking import ReadWriteLock

logger = logging.getLogger(__name__)


class EventConfigStore:
    def __init__(self, config_file: str, clock: Callable = utcnow):
        """
        Initialize event configuration store.

        Args:
            config_file: Path of the JSON file holding the record
            clock: Returns the current aware datetime (UTC)
        """
        self.path = Path(config_file)
        self.clock = clock
        self._lock = ReadWriteLock()
        self._config: Optional[EventConfig] = None

    def load_or_init(self) -> EventConfig:
        """
        Load the record from disk, writing the default on first run.

        Called once at startup, before any request is served.

        Returns:
            The loaded configuration

        Raises:
            ValidationError: If the file exists but does not hold a valid record
            PersistenceError: If the file cannot be read or the default written
        """
        if not self.path.exists():
            logger.info(f"No event config at {self.path}, writing default")
            config = EventConfig.model_validate(
                {**DEFAULT_EVENT_CONFIG, "updatedAt": format_rfc3339(self.clock())}
            )
            self._write_file(config)
            self._config = config
            return config

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"failed to read {self.path}: {e}") from e

        self._config = self.parse(raw)
        logger.info(f"Loaded event config for {self._config.event_date} from {self.path}")
        return self._config

    @staticmethod
    def parse(raw: str) -> EventConfig:
        """
        Parse and validate a JSON document into an EventConfig.

        Raises:
            ValidationError: On bad JSON, unknown fields, or broken invariants
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"invalid json: {e}") from e
        try:
            return EventConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"validation failed: {_describe(e)}") from e

    async def get(self) -> EventConfig:
        """Return a snapshot of the current record."""
        async with self._lock.read():
            if self._config is None:
                raise PersistenceError("event config not loaded")
            return self._config.model_copy(deep=True)

    async def replace(self, updated: EventConfig) -> EventConfig:
        """
        Replace the record wholesale and persist it.

        The in-memory record only changes after the file was written.

        Args:
            updated: Validated replacement record

        Returns:
            The stored record, stamped with a fresh updatedAt
        """
        stamped = updated.model_copy(update={"updated_at": format_rfc3339(self.clock())})

        async with self._lock.write():
            await asyncio.to_thread(self._write_file, stamped)
            self._config = stamped

        logger.info(f"Event config replaced (date={stamped.event_date}, fees={len(stamped.fees)})")
        return stamped.model_copy(deep=True)

    def _write_file(self, config: EventConfig) -> None:
        """Write atomically: temp file in the same directory, then rename."""
        payload = json.dumps(config.to_json_dict(), indent=2, ensure_ascii=False)
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Failed to persist event config to {self.path}: {e}")
            raise PersistenceError(f"failed to persist config: {e}") from e


def _describe(error: PydanticValidationError) -> str:
    """Flatten pydantic errors into one readable line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
