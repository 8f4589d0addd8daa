"""Unit tests for the judging agent client and its transports."""

import json
from types import SimpleNamespace

import pytest
import requests

from config import AppConfig
from services.agent_client import (
    GENERIC_FAILURE,
    MALFORMED_RESPONSE,
    NETWORK_FAILURE,
    AgentClient,
    AgentFailure,
    AgentSuccess,
    HttpAgentTransport,
    OpenAIAgentTransport,
    build_client,
    normalize_response,
)
from services.errors import ErrorKind
from conftest import make_result, success_envelope


def _client(response):
    calls = []

    def transport(message, agent_id):
        calls.append((message, agent_id))
        if isinstance(response, Exception):
            raise response
        return response

    return AgentClient(transport, "agent-123"), calls


def test_success_envelope():
    client, calls = _client(success_envelope())
    outcome = client.call('{"gameName": "Pixel Dreams"}')
    assert isinstance(outcome, AgentSuccess)
    assert outcome.ok
    assert outcome.result.game_name == "Pixel Dreams"
    assert outcome.metadata.evaluation_version == "1.0"
    assert calls == [('{"gameName": "Pixel Dreams"}', "agent-123")]


def test_success_preserves_result_fields():
    raw = make_result(percentage=91.25)
    outcome = normalize_response(success_envelope(result=raw))
    assert outcome.result.model_dump() == raw


def test_agent_message_surfaced():
    outcome = normalize_response({"success": True, "response": {"status": "error", "message": "Game link unreachable"}})
    assert outcome == AgentFailure(ErrorKind.AGENT_REJECTED, "Game link unreachable")


def test_top_level_error_preferred():
    outcome = normalize_response({"success": False, "error": "quota exceeded", "response": {"message": "other"}})
    assert outcome.message == "quota exceeded"


@pytest.mark.parametrize(
    "raw",
    [
        {"success": False},
        {"success": False, "response": {"message": ""}},
        {"success": False, "response": {"message": "   "}},
        {"success": False, "response": {"message": 42}},
        {"success": False, "response": None, "error": None},
        {"success": "yes", "response": {"status": "success", "result": make_result()}},
        None,
        [],
        "oops",
    ],
)
def test_failure_message_never_empty(raw):
    outcome = normalize_response(raw)
    assert isinstance(outcome, AgentFailure)
    assert outcome.kind == ErrorKind.AGENT_REJECTED
    assert outcome.message == GENERIC_FAILURE


def test_malformed_result_rejected():
    outcome = normalize_response(success_envelope(result={"summary": "no names"}))
    assert outcome == AgentFailure(ErrorKind.AGENT_REJECTED, MALFORMED_RESPONSE)


def _with(path, value):
    raw = make_result()
    target = raw
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    return raw


@pytest.mark.parametrize(
    "path, value",
    [
        (("feedback", "strengths"), 5),
        (("feedback", "areas_for_growth"), True),
        (("feedback",), "great"),
        (("rule_compliance",), "yes"),
        (("rule_compliance", "compliant"), "maybe"),
        (("score_breakdown",), {"a": 1}),
        (("score_breakdown",), [5]),
        (("game_name",), 3),
        (("percentage_score",), "high"),
    ],
)
def test_badly_typed_result_fields_rejected(path, value):
    """Wrongly typed agent fields become a rejection, never an exception."""
    outcome = normalize_response(success_envelope(result=_with(path, value)))
    assert outcome == AgentFailure(ErrorKind.AGENT_REJECTED, MALFORMED_RESPONSE)


def test_badly_typed_metadata_rejected():
    outcome = normalize_response(success_envelope(metadata=["not", "an", "object"]))
    assert outcome == AgentFailure(ErrorKind.AGENT_REJECTED, MALFORMED_RESPONSE)


def test_missing_metadata_defaults():
    env = success_envelope()
    env["response"]["metadata"] = None
    outcome = normalize_response(env)
    assert isinstance(outcome, AgentSuccess)
    assert outcome.metadata.agent_name == ""


def test_transport_error_is_generic(caplog):
    client, _ = _client(requests.ConnectionError("connection refused"))
    outcome = client.call("{}")
    assert outcome == AgentFailure(ErrorKind.TRANSPORT, NETWORK_FAILURE)
    assert "connection refused" not in outcome.message
    assert "failed" in caplog.text


def test_parse_error_is_transport_error():
    client, _ = _client(json.JSONDecodeError("Expecting value", "", 0))
    assert client.call("{}").kind == ErrorKind.TRANSPORT


class _FakeResponse:
    def __init__(self, body, status=200):
        self.body = body
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.body


def test_http_transport_posts_payload(monkeypatch):
    seen = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        seen.update(url=url, json=json, headers=headers, timeout=timeout)
        return _FakeResponse(success_envelope())

    monkeypatch.setattr("services.agent_client.requests.post", fake_post)
    transport = HttpAgentTransport("https://agents.example/run", api_key="secret", timeout=30)
    body = transport('{"a": 1}', "agent-123")
    assert body["success"] is True
    assert seen["json"] == {"message": '{"a": 1}', "agent_id": "agent-123"}
    assert seen["headers"]["Authorization"] == "Bearer secret"
    assert seen["timeout"] == 30


def test_http_transport_status_error(monkeypatch):
    monkeypatch.setattr(
        "services.agent_client.requests.post",
        lambda *a, **kw: _FakeResponse({}, status=502),
    )
    client = AgentClient(HttpAgentTransport("https://agents.example/run"), "agent-123")
    assert client.call("{}") == AgentFailure(ErrorKind.TRANSPORT, NETWORK_FAILURE)


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_openai(content):
    completions = _FakeCompletions(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_openai_transport_wraps_json():
    fake, completions = _fake_openai("Here you go:\n" + json.dumps(make_result()) + "\nThanks")
    client = AgentClient(OpenAIAgentTransport(fake, "gpt-4o-mini"), "agent-123")
    outcome = client.call('{"gameName": "Pixel Dreams"}')
    assert isinstance(outcome, AgentSuccess)
    assert outcome.result.team_name == "Team Nova"
    assert outcome.metadata.agent_name == "Game Jam Judge"
    assert completions.kwargs["model"] == "gpt-4o-mini"
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert '{"gameName": "Pixel Dreams"}' in completions.kwargs["messages"][1]["content"]


def test_openai_transport_unparseable_output():
    fake, _ = _fake_openai("I cannot judge this.")
    outcome = AgentClient(OpenAIAgentTransport(fake, "gpt-4o-mini"), "agent-123").call("{}")
    assert outcome == AgentFailure(ErrorKind.AGENT_REJECTED, "Parsing failed.")


def _cfg(**overrides):
    values = dict(
        OPENAI_API_KEY="sk-test",
        OPENAI_MODEL="gpt-4o-mini",
        AGENT_API_URL="",
        AGENT_API_KEY="",
        AGENT_ID="agent-123",
        AGENT_TIMEOUT=60.0,
        DATA_DIR=".judge_data",
        POLL_INTERVAL_SECONDS=1.0,
        LOG_LEVEL="INFO",
    )
    values.update(overrides)
    return AppConfig(**values)


def test_build_client_prefers_agent_api():
    client = build_client(_cfg(AGENT_API_URL="https://agents.example/run"))
    assert isinstance(client.transport, HttpAgentTransport)
    assert client.agent_id == "agent-123"


def test_build_client_falls_back_to_openai():
    client = build_client(_cfg())
    assert isinstance(client.transport, OpenAIAgentTransport)
    assert client.transport.model == "gpt-4o-mini"
    assert client.transport.client.max_retries == 0
