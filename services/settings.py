# services/settings.py
import logging
from dataclasses import dataclass
from typing import Dict, Mapping

from models import CRITERIA, MAX_WEIGHT, MIN_WEIGHT, EventSettings, coerce_weights
from store import SETTINGS_KEY, WEIGHTS_KEY, LocalStore

logger = logging.getLogger(__name__)

REQUIRED_TOTAL = 100


@dataclass(frozen=True)
class SaveResult:
    accepted: bool
    message: str
    total: int


def weight_total_message(total: int) -> str:
    diff = total - REQUIRED_TOTAL
    if diff == 0:
        return f"Total weight: {total}%"
    direction = "over" if diff > 0 else "under"
    return f"Total weight must equal {REQUIRED_TOTAL}% (currently {total}%, {abs(diff)}% {direction})"


class SettingsManager:
    """Staged edits of event settings and criteria weights.

    Nothing reaches storage until ``save`` accepts the draft.
    """

    def __init__(self, settings: EventSettings, weights: Mapping[str, int]):
        self.settings = settings.model_copy(deep=True)
        self.weights: Dict[str, int] = coerce_weights(weights)

    def set_event_name(self, name: str) -> None:
        self.settings.event_name = name

    def set_theme_description(self, theme: str) -> None:
        self.settings.theme_description = theme

    def add_rule(self, text: str) -> bool:
        rule = (text or "").strip()
        if not rule:
            return False
        self.settings.rules.append(rule)
        return True

    def remove_rule(self, index: int) -> str:
        if index < 0 or index >= len(self.settings.rules):
            raise IndexError(f"No rule at position {index}")
        return self.settings.rules.pop(index)

    def set_weight(self, criterion: str, value: int) -> int:
        if criterion not in CRITERIA:
            raise KeyError(criterion)
        self.weights[criterion] = max(MIN_WEIGHT, min(MAX_WEIGHT, int(value)))
        return self.weights[criterion]

    @property
    def total_weight(self) -> int:
        return sum(self.weights.values())

    def save(self, store: LocalStore) -> SaveResult:
        total = self.total_weight
        if total != REQUIRED_TOTAL:
            return SaveResult(False, weight_total_message(total), total)
        store.set(SETTINGS_KEY, self.settings.model_dump(by_alias=True))
        store.set(WEIGHTS_KEY, dict(self.weights))
        logger.info("Saved event settings %r with %d rules", self.settings.event_name, len(self.settings.rules))
        return SaveResult(True, "Settings saved successfully!", total)
