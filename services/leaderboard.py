# services/leaderboard.py
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from models import CRITERIA, CRITERIA_LABELS, EvaluationResult, SavedEvaluation

SORT_TOTAL = "total"
SORT_KEYS = (SORT_TOTAL,) + CRITERIA

CSV_HEADERS = [
    "Rank",
    "Game Name",
    "Team",
    "Total Score",
    "Percentage",
    "Compliant",
] + [CRITERIA_LABELS[c] for c in CRITERIA]

RECENT_LIMIT = 5


@dataclass(frozen=True)
class RankedEvaluation:
    rank: int
    evaluation: SavedEvaluation


@dataclass(frozen=True)
class DashboardSummary:
    total_submissions: int
    average_percentage: float
    top_rated: Optional[SavedEvaluation]
    compliance_rate: float
    recent: List[SavedEvaluation]


def criterion_weighted_score(result: EvaluationResult, criterion: str) -> float:
    item = result.breakdown_for(criterion)
    return item.weighted_score if item is not None else 0


def sort_evaluations(evaluations: Iterable[SavedEvaluation], sort_by: str = SORT_TOTAL) -> List[SavedEvaluation]:
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")
    if sort_by == SORT_TOTAL:
        key = lambda e: e.result.percentage_score
    else:
        key = lambda e: criterion_weighted_score(e.result, sort_by)
    # sorted() is stable, so ties keep input order
    return sorted(evaluations, key=key, reverse=True)


def filter_evaluations(evaluations: Iterable[SavedEvaluation], compliant: Optional[bool] = None) -> List[SavedEvaluation]:
    if compliant is None:
        return list(evaluations)
    return [e for e in evaluations if e.result.rule_compliance.compliant == compliant]


def rank(evaluations: Iterable[SavedEvaluation], sort_by: str = SORT_TOTAL, compliant: Optional[bool] = None) -> List[RankedEvaluation]:
    ordered = filter_evaluations(sort_evaluations(evaluations, sort_by), compliant)
    return [RankedEvaluation(rank=i, evaluation=e) for i, e in enumerate(ordered, start=1)]


def _csv_row(r: RankedEvaluation) -> list:
    res = r.evaluation.result
    return [
        r.rank,
        res.game_name,
        res.team_name,
        res.weighted_score,
        f"{res.percentage_score:.2f}",
        "Yes" if res.rule_compliance.compliant else "No",
    ] + [criterion_weighted_score(res, c) for c in CRITERIA]


def to_csv(ranked: Sequence[RankedEvaluation]) -> str:
    # object dtype keeps a missing criterion as "0" next to float scores
    df = pd.DataFrame([_csv_row(r) for r in ranked], columns=CSV_HEADERS, dtype=object)
    return df.to_csv(index=False, lineterminator="\n").rstrip("\n")


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"leaderboard-{today.isoformat()}.csv"


def to_dataframe(ranked: Sequence[RankedEvaluation]) -> pd.DataFrame:
    rows = []
    for r in ranked:
        res = r.evaluation.result
        row = {
            "Rank": r.rank,
            "Game": res.game_name,
            "Team": res.team_name,
            "Score": round(res.percentage_score, 2),
            "Compliant": res.rule_compliance.compliant,
            "Recommendation": res.rank_recommendation,
        }
        for c in CRITERIA:
            row[CRITERIA_LABELS[c]] = criterion_weighted_score(res, c)
        rows.append(row)
    return pd.DataFrame(rows, columns=["Rank", "Game", "Team", "Score", "Compliant", "Recommendation"] + [CRITERIA_LABELS[c] for c in CRITERIA])


def summarize(evaluations: Sequence[SavedEvaluation]) -> DashboardSummary:
    n = len(evaluations)
    if n == 0:
        return DashboardSummary(0, 0.0, None, 0.0, [])
    avg = sum(e.result.percentage_score for e in evaluations) / n
    top = max(evaluations, key=lambda e: e.result.percentage_score)
    compliant = sum(1 for e in evaluations if e.result.rule_compliance.compliant)
    recent = sorted(evaluations, key=lambda e: e.saved_at, reverse=True)[:RECENT_LIMIT]
    return DashboardSummary(
        total_submissions=n,
        average_percentage=avg,
        top_rated=top,
        compliance_rate=compliant / n * 100,
        recent=recent,
    )
