"""
dynastysim/persistence.py
~~~~~~~~~~~~~~~~~~~~~~~~~
Snapshot serialization and a file-backed key-value save store.

The payload is the full ``GameState`` as camelCase JSON. It is not
versioned; a payload that no longer parses is treated as no save at all.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from dynastysim.models import GameState
from dynastysim.paths import SAVE_DIR

logger = logging.getLogger(__name__)

SAVE_KEY = "house_eternal_save"


def serialize_state(state: GameState) -> str:
    return state.model_dump_json(by_alias=True)


def deserialize_state(payload: str | bytes) -> GameState | None:
    """Parse a snapshot, or return None if it is corrupt or incompatible."""
    try:
        return GameState.model_validate_json(payload)
    except ValidationError as exc:
        logger.warning("Save payload could not be parsed: %d error(s).", exc.error_count())
        logger.debug("Validation details: %s", exc)
        return None


class SaveStore:
    """Stores one JSON snapshot per key under ``save_dir``."""

    def __init__(self, save_dir: str | Path = SAVE_DIR, key: str = SAVE_KEY) -> None:
        self._dir = Path(save_dir)
        self.key = key

    @property
    def path(self) -> Path:
        return self._dir / f"{self.key}.json"

    def save(self, state: GameState) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        # Write beside the target then rename, so a crash never leaves half a file.
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(serialize_state(state), encoding="utf-8")
        tmp_path.replace(self.path)
        logger.info("Saved week %d to %s.", state.current_week, self.path)

    def load(self) -> GameState | None:
        try:
            payload = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.error("Error reading save file '%s': %s", self.path, exc)
            return None
        return deserialize_state(payload)

    def has_save(self) -> bool:
        return self.path.is_file()

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)
