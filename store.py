# store.py
import os
import re
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from models import (
    DEFAULT_EVENT_SETTINGS,
    EventSettings,
    SavedEvaluation,
    coerce_weights,
)
from services.errors import ErrorKind

logger = logging.getLogger(__name__)

# tags storage failures on log records
_STORAGE_ERROR = {"error_kind": ErrorKind.STORAGE.value}

EVALUATIONS_KEY = "evaluations"
SETTINGS_KEY = "eventSettings"
WEIGHTS_KEY = "criteriaWeights"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStore:
    """JSON key/value store, one file per key under ``root``.

    ``get`` never raises; ``set`` logs write failures and reports them
    through its return value only.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if not key or not _KEY_RE.match(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return default
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, using default: %s", path, e, extra=_STORAGE_ERROR)
            return default

    def set(self, key: str, value: Any) -> bool:
        path = self._path(key)
        tmp_name = None
        try:
            data = json.dumps(value, indent=2)
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_name, path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save %r to local storage: %s", key, e, extra=_STORAGE_ERROR)
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.remove(tmp_name)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_name)
            return False


def load_evaluations(store: LocalStore) -> List[SavedEvaluation]:
    raw = store.get(EVALUATIONS_KEY, [])
    if not isinstance(raw, list):
        logger.warning("Ignoring non-list %r value in storage", EVALUATIONS_KEY, extra=_STORAGE_ERROR)
        return []
    out: List[SavedEvaluation] = []
    for i, item in enumerate(raw):
        try:
            out.append(SavedEvaluation.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping invalid saved evaluation #%d: %s", i, e, extra=_STORAGE_ERROR)
    return out


def load_settings(store: LocalStore) -> EventSettings:
    raw = store.get(SETTINGS_KEY, None)
    if raw is None:
        return DEFAULT_EVENT_SETTINGS.model_copy(deep=True)
    try:
        return EventSettings.model_validate(raw)
    except ValidationError as e:
        logger.warning("Invalid event settings in storage, using defaults: %s", e, extra=_STORAGE_ERROR)
        return DEFAULT_EVENT_SETTINGS.model_copy(deep=True)


def load_weights(store: LocalStore) -> Dict[str, int]:
    return coerce_weights(store.get(WEIGHTS_KEY, None))
