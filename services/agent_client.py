# services/agent_client.py
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

import requests
from openai import OpenAI
from pydantic import ValidationError

from config import AppConfig
from models import CRITERIA, CRITERIA_LABELS, EvaluationMetadata, EvaluationResult
from services.errors import ErrorKind

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Evaluation failed"
NETWORK_FAILURE = "Network error during evaluation"
MALFORMED_RESPONSE = "Evaluation response was malformed"

AGENT_NAME = "Game Jam Judge"
EVALUATION_VERSION = "1.0"

# (message, agent_id) -> raw response envelope
Transport = Callable[[str, str], Dict[str, Any]]


@dataclass(frozen=True)
class AgentSuccess:
    result: EvaluationResult
    metadata: EvaluationMetadata
    ok = True


@dataclass(frozen=True)
class AgentFailure:
    kind: ErrorKind
    message: str
    ok = False


AgentOutcome = Union[AgentSuccess, AgentFailure]


def _first_text(*values: Any) -> Optional[str]:
    for v in values:
        if isinstance(v, str) and v.strip():
            return v
    return None


def normalize_response(raw: Any) -> AgentOutcome:
    """Turn an untrusted agent envelope into a success or failure outcome."""
    if not isinstance(raw, dict):
        logger.warning("Agent returned a non-object envelope: %r", type(raw).__name__)
        return AgentFailure(ErrorKind.AGENT_REJECTED, GENERIC_FAILURE)

    response = raw.get("response")
    if not isinstance(response, dict):
        response = {}

    if raw.get("success") is True and response.get("status") == "success":
        try:
            result = EvaluationResult.model_validate(response.get("result"))
            metadata = EvaluationMetadata.model_validate(response.get("metadata") or {})
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("Agent result failed validation: %s", e)
            return AgentFailure(ErrorKind.AGENT_REJECTED, MALFORMED_RESPONSE)
        return AgentSuccess(result=result, metadata=metadata)

    message = _first_text(raw.get("error"), response.get("message")) or GENERIC_FAILURE
    logger.warning("Agent rejected evaluation: %s", message)
    return AgentFailure(ErrorKind.AGENT_REJECTED, message)


class AgentClient:
    """One round trip to the judging agent; never retried."""

    def __init__(self, transport: Transport, agent_id: str):
        self.transport = transport
        self.agent_id = agent_id

    def call(self, payload: str) -> AgentOutcome:
        try:
            raw = self.transport(payload, self.agent_id)
        except Exception:
            logger.exception("Agent call to %s failed", self.agent_id)
            return AgentFailure(ErrorKind.TRANSPORT, NETWORK_FAILURE)
        return normalize_response(raw)


class HttpAgentTransport:
    def __init__(self, url: str, api_key: str = "", timeout: float = 120.0):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    def __call__(self, message: str, agent_id: str) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        resp = requests.post(
            self.url,
            json={"message": message, "agent_id": agent_id},
            headers=headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()


def _build_prompt(payload: str):
    system = (
        "You are an expert game jam judge. "
        "Evaluate the submission using ONLY the judge's scores, the criteria weights and the event rules. "
        "Return valid JSON with fields: game_name, team_name, weighted_score, max_possible_score, "
        "percentage_score, score_breakdown[], rule_compliance{}, feedback{}, rank_recommendation, summary."
    )
    example = (
        '{"game_name":"...", "team_name":"...", "weighted_score":7.85, "max_possible_score":10, '
        '"percentage_score":78.5, '
        '"score_breakdown":[{"criterion":"originality", "raw_score":8, "weight":15, "weighted_score":1.2}], '
        '"rule_compliance":{"compliant":true, "assessment":"...", "theme_alignment":"..."}, '
        '"feedback":{"strengths":["..."], "areas_for_growth":["..."], "creative_insights":["..."], '
        '"learning_opportunities":["..."]}, '
        '"rank_recommendation":"...", "summary":"..."}'
    )
    criteria = ", ".join(f"{c} ({CRITERIA_LABELS[c]})" for c in CRITERIA)
    user = (
        f"Criteria ids: {criteria}\n\n"
        f"Judging input (JSON):\n{payload}\n\n"
        "Scores are 0-10, weights are percentages. weighted_score per criterion = raw_score * weight / 100; "
        "the total weighted_score is their sum out of max_possible_score 10.\n"
        "Judge rule compliance from eventRules and complianceNotes.\n"
        "Respond ONLY with JSON:\n" + example
    )
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


def _parse_json(text: str) -> Optional[dict]:
    try:
        i, j = text.find("{"), text.rfind("}")
        if i != -1 and j != -1 and j > i:
            return json.loads(text[i:j+1])
        return json.loads(text)
    except (TypeError, ValueError):
        return None


class OpenAIAgentTransport:
    """Runs the judging agent as an OpenAI chat completion in JSON mode."""

    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model

    def __call__(self, message: str, agent_id: str) -> Dict[str, Any]:
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=_build_prompt(message),
            temperature=0.2,
            response_format={"type": "json_object"},
        )
        data = _parse_json(resp.choices[0].message.content or "")
        if not isinstance(data, dict):
            return {"success": False, "response": {"status": "error", "message": "Parsing failed."}}
        return {
            "success": True,
            "response": {
                "status": "success",
                "result": data,
                "metadata": {
                    "agent_name": AGENT_NAME,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "evaluation_version": EVALUATION_VERSION,
                },
            },
        }


def build_client(cfg: AppConfig) -> AgentClient:
    if cfg.agent_api_configured:
        transport: Transport = HttpAgentTransport(cfg.AGENT_API_URL, cfg.AGENT_API_KEY, cfg.AGENT_TIMEOUT)
    else:
        # no automatic retries
        client = OpenAI(api_key=cfg.OPENAI_API_KEY, timeout=cfg.AGENT_TIMEOUT, max_retries=0)
        transport = OpenAIAgentTransport(client, cfg.OPENAI_MODEL)
    return AgentClient(transport, cfg.AGENT_ID)
