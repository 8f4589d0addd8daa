# models.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Mapping, Optional

# Fixed judging criteria, in display/export order
CRITERIA = (
    "originality",
    "aiToolUsage",
    "playability",
    "polish",
    "completeness",
    "presentation",
    "technicalComplexity",
    "accessibility",
    "ruleRelevance",
)

CRITERIA_LABELS: Dict[str, str] = {
    "originality": "Originality",
    "aiToolUsage": "AI Tool Usage",
    "playability": "Playability",
    "polish": "Polish",
    "completeness": "Completeness",
    "presentation": "Presentation",
    "technicalComplexity": "Technical Complexity",
    "accessibility": "Accessibility",
    "ruleRelevance": "Rule Relevance",
}

DEFAULT_WEIGHTS: Dict[str, int] = {
    "originality": 15,
    "aiToolUsage": 20,
    "playability": 15,
    "polish": 10,
    "completeness": 10,
    "presentation": 10,
    "technicalComplexity": 5,
    "accessibility": 5,
    "ruleRelevance": 10,
}

MIN_SCORE, MAX_SCORE = 0, 10
MIN_WEIGHT, MAX_WEIGHT = 0, 100


def empty_scores() -> Dict[str, int]:
    """All criteria unset (0)."""
    return {c: 0 for c in CRITERIA}


def coerce_weights(raw: Any) -> Dict[str, int]:
    """Repair a loosely typed weight mapping read back from storage.

    Unknown keys are dropped; missing or non-numeric entries fall back to the
    default weight for that criterion.
    """
    weights = dict(DEFAULT_WEIGHTS)
    if not isinstance(raw, Mapping):
        return weights
    for c in CRITERIA:
        value = raw.get(c)
        if isinstance(value, bool):
            continue
        try:
            weights[c] = int(value)
        except (TypeError, ValueError):
            continue
    return weights


def _str_list(v: Any) -> List[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [v] if v.strip() else []
    if not isinstance(v, (list, tuple)):
        raise ValueError(f"expected a list of strings, got {type(v).__name__}")
    return [str(item) for item in v if item is not None]


class EventSettings(BaseModel):
    event_name: str = Field("", alias="eventName")
    theme_description: str = Field("", alias="themeDescription")
    rules: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


DEFAULT_EVENT_SETTINGS = EventSettings(
    event_name="AI Game Jam 2024",
    theme_description="Artistic Expression through AI",
    rules=[
        "Game must use at least 2 AI tools",
        "Game must be playable in browser",
        "Must align with the Artistic Expression theme",
    ],
)


class ScoreBreakdownItem(BaseModel):
    criterion: str
    raw_score: float = 0.0
    weight: float = 0.0
    weighted_score: float = 0.0


class RuleCompliance(BaseModel):
    compliant: bool = False
    assessment: str = ""
    theme_alignment: str = ""


class Feedback(BaseModel):
    strengths: List[str] = Field(default_factory=list)
    areas_for_growth: List[str] = Field(default_factory=list)
    creative_insights: List[str] = Field(default_factory=list)
    learning_opportunities: List[str] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def lists_of_strings(cls, v):
        return _str_list(v)


class EvaluationResult(BaseModel):
    game_name: str
    team_name: str
    weighted_score: float = 0.0
    max_possible_score: float = 0.0
    percentage_score: float = 0.0
    score_breakdown: List[ScoreBreakdownItem] = Field(default_factory=list)
    rule_compliance: RuleCompliance = Field(default_factory=RuleCompliance)
    feedback: Feedback = Field(default_factory=Feedback)
    rank_recommendation: str = ""
    summary: str = ""

    @field_validator("score_breakdown", mode="before")
    @classmethod
    def breakdown_list(cls, v):
        return v or []

    @field_validator("rule_compliance", "feedback", mode="before")
    @classmethod
    def object_or_empty(cls, v):
        return {} if v is None else v

    @field_validator("rank_recommendation", "summary", mode="before")
    @classmethod
    def text_or_empty(cls, v):
        return "" if v is None else v

    def breakdown_for(self, criterion: str) -> Optional[ScoreBreakdownItem]:
        for item in self.score_breakdown:
            if item.criterion == criterion:
                return item
        return None


class EvaluationMetadata(BaseModel):
    agent_name: str = ""
    timestamp: str = ""
    evaluation_version: str = ""


class SavedEvaluation(BaseModel):
    id: str = Field(..., min_length=1)
    result: EvaluationResult
    metadata: EvaluationMetadata
    saved_at: str = Field(..., alias="savedAt")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class JudgingPayload(BaseModel):
    game_name: str = Field(..., alias="gameName")
    team_name: str = Field(..., alias="teamName")
    description: str = ""
    scores: Dict[str, int]
    criteria_weights: Dict[str, int] = Field(..., alias="criteriaWeights")
    event_rules: str = Field("", alias="eventRules")
    compliance_notes: str = Field("", alias="complianceNotes")

    model_config = ConfigDict(populate_by_name=True)
