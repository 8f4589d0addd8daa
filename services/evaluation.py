# services/evaluation.py
import json
import uuid
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

from models import (
    CRITERIA,
    CRITERIA_LABELS,
    MAX_SCORE,
    MIN_SCORE,
    EvaluationMetadata,
    EvaluationResult,
    EventSettings,
    JudgingPayload,
    SavedEvaluation,
    empty_scores,
)
from services.agent_client import AgentClient, AgentOutcome, AgentSuccess
from services.errors import ErrorKind, NothingToSaveError
from store import EVALUATIONS_KEY, LocalStore

logger = logging.getLogger(__name__)

NAMES_REQUIRED = "Game name and team name are required"


def new_evaluation_id() -> str:
    return f"eval-{uuid.uuid4().hex}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class EvaluationForm:
    game_name: str = ""
    team_name: str = ""
    description: str = ""
    scores: Dict[str, int] = field(default_factory=empty_scores)
    compliance_notes: str = ""


class EvaluationWorkflow:
    """State of one judging session, from form input to a saved record."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.form = EvaluationForm()
        self.result: Optional[EvaluationResult] = None
        self.metadata: Optional[EvaluationMetadata] = None
        self.error: Optional[str] = None
        self.error_kind: Optional[ErrorKind] = None
        self.loading = False

    def set_score(self, criterion: str, value: int) -> None:
        if criterion not in self.form.scores:
            raise KeyError(criterion)
        self.form.scores[criterion] = max(MIN_SCORE, min(MAX_SCORE, int(value)))

    def missing_criteria(self) -> List[str]:
        return [c for c in CRITERIA if self.form.scores.get(c, 0) == 0]

    def validate(self) -> Optional[str]:
        if not self.form.game_name.strip() or not self.form.team_name.strip():
            return NAMES_REQUIRED
        missing = self.missing_criteria()
        if missing:
            return "Please score all criteria. Missing: " + ", ".join(CRITERIA_LABELS[c] for c in missing)
        return None

    def build_payload(self, weights: Mapping[str, int], settings: EventSettings) -> JudgingPayload:
        return JudgingPayload(
            game_name=self.form.game_name.strip(),
            team_name=self.form.team_name.strip(),
            description=self.form.description.strip(),
            scores=dict(self.form.scores),
            criteria_weights=dict(weights),
            event_rules=". ".join(settings.rules),
            compliance_notes=self.form.compliance_notes.strip(),
        )

    def submit(self, client: AgentClient, weights: Mapping[str, int], settings: EventSettings) -> Optional[AgentOutcome]:
        if self.loading:
            logger.warning("Ignoring submit while an evaluation is in flight")
            return None
        self.result = None
        self.metadata = None
        self.error = None
        self.error_kind = None

        problem = self.validate()
        if problem:
            self.error = problem
            self.error_kind = ErrorKind.VALIDATION
            return None

        payload = self.build_payload(weights, settings)
        self.loading = True
        try:
            outcome = client.call(json.dumps(payload.model_dump(by_alias=True)))
        finally:
            self.loading = False

        if isinstance(outcome, AgentSuccess):
            self.result = outcome.result
            self.metadata = outcome.metadata
        else:
            self.error = outcome.message
            self.error_kind = outcome.kind
        return outcome

    @property
    def can_save(self) -> bool:
        return self.result is not None and self.metadata is not None

    def save(self, store: LocalStore) -> SavedEvaluation:
        if not self.can_save:
            raise NothingToSaveError("No evaluation result to save")
        record = SavedEvaluation(
            id=new_evaluation_id(),
            result=self.result,
            metadata=self.metadata,
            saved_at=_now_iso(),
        )
        # Re-read so saves from elsewhere since page load are kept
        existing = store.get(EVALUATIONS_KEY, [])
        if not isinstance(existing, list):
            existing = []
        if store.set(EVALUATIONS_KEY, existing + [record.model_dump(by_alias=True)]):
            logger.info("Saved evaluation %s for %r", record.id, record.result.game_name)
        return record
