import pytest

from models import CRITERIA, DEFAULT_WEIGHTS, SavedEvaluation
from store import LocalStore


def make_result(game="Pixel Dreams", team="Team Nova", percentage=78.5, compliant=True, breakdown=None):
    """Build a raw agent result dict; ``breakdown`` maps criterion -> weighted score."""
    if breakdown is None:
        breakdown = {c: round(DEFAULT_WEIGHTS[c] * 0.08, 2) for c in CRITERIA}
    return {
        "game_name": game,
        "team_name": team,
        "weighted_score": round(percentage / 10, 2),
        "max_possible_score": 10,
        "percentage_score": percentage,
        "score_breakdown": [
            {"criterion": c, "raw_score": 8, "weight": DEFAULT_WEIGHTS.get(c, 0), "weighted_score": w}
            for c, w in breakdown.items()
        ],
        "rule_compliance": {
            "compliant": compliant,
            "assessment": "Uses three AI tools and runs in the browser.",
            "theme_alignment": "Strong painterly art direction.",
        },
        "feedback": {
            "strengths": ["Striking visuals"],
            "areas_for_growth": ["Tutorial is short"],
            "creative_insights": ["Procedural palettes"],
            "learning_opportunities": ["Playtest earlier"],
        },
        "rank_recommendation": "Top 3 contender",
        "summary": "A polished, thematic entry.",
    }


def make_metadata():
    return {"agent_name": "Game Jam Judge", "timestamp": "2024-05-01T10:00:00+00:00", "evaluation_version": "1.0"}


def make_saved(eval_id="eval-1", saved_at="2024-05-01T10:00:00+00:00", **kwargs) -> SavedEvaluation:
    return SavedEvaluation.model_validate(
        {"id": eval_id, "result": make_result(**kwargs), "metadata": make_metadata(), "savedAt": saved_at}
    )


def success_envelope(result=None, metadata=None):
    return {
        "success": True,
        "response": {
            "status": "success",
            "result": result if result is not None else make_result(),
            "metadata": metadata if metadata is not None else make_metadata(),
        },
    }


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "data")


@pytest.fixture
def full_scores():
    return {c: 7 for c in CRITERIA}
