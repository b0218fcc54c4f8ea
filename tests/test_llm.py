"""Provider selection and response parsing: no network."""
import logging
from types import SimpleNamespace
import pytest
import moderator.llm as llm
from moderator.llm import (
    MissingApiKeyError,
    complete,
    extract_json_from_response,
    get_client,
    get_model,
    get_temperature,
    response_format_for,
)


def test_extract_json_plain_and_fenced() -> None:
    assert extract_json_from_response('{"grade": "S0"}') == {"grade": "S0"}
    assert extract_json_from_response('```json\n{"grade": "S1"}\n```') == {"grade": "S1"}
    assert extract_json_from_response('Here:\n```\n{"grade": "S2"}\n```') == {"grade": "S2"}


def test_extract_json_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        extract_json_from_response("not json")
    with pytest.raises(ValueError):
        extract_json_from_response("[1, 2]")


def test_missing_openai_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(MissingApiKeyError):
        get_client()


def test_placeholder_gemini_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "REPLACE_ME")
    with pytest.raises(ValueError):
        get_client()


def test_models_per_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENAI_MODEL", "GEMINI_MODEL", "GROQ_MODEL", "OLLAMA_MODEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    assert get_model() == "gemini-2.5-flash"
    monkeypatch.setenv("LLM_PROVIDER", "ollama")
    assert get_model() == "llama3.2-vision"
    monkeypatch.setenv("LLM_PROVIDER", " OpenAI ")
    assert get_model() == "gpt-4o-mini"
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
    assert get_model() == "gpt-4o"


def test_temperature(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MODERATION_TEMPERATURE", raising=False)
    assert get_temperature() == 0.2
    monkeypatch.setenv("MODERATION_TEMPERATURE", "0")
    assert get_temperature() == 0.0
    monkeypatch.setenv("MODERATION_TEMPERATURE", "low")
    with pytest.raises(ValueError):
        get_temperature()


def test_response_format_strict_schema_or_json_mode() -> None:
    schema = {"type": "object"}
    fmt = response_format_for(schema, "moderation_result", provider="openai")
    assert fmt["type"] == "json_schema"
    assert fmt["json_schema"] == {"name": "moderation_result", "schema": schema, "strict": True}
    assert response_format_for(schema, "moderation_result", provider="groq") == {"type": "json_object"}


class FakeCompletions:
    def __init__(self, choices=None, error: Exception | None = None) -> None:
        self.choices = choices if choices is not None else []
        self.error = error
        self.kwargs: list[dict] = []

    def create(self, **kwargs):
        self.kwargs.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(choices=self.choices)


def _client(completions: FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _choice(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(message=SimpleNamespace(content=content))


def test_complete_passes_parts_and_options(monkeypatch: pytest.MonkeyPatch) -> None:
    completions = FakeCompletions(choices=[_choice('{"grade": "S0"}')])
    monkeypatch.setattr(llm, "get_client", lambda: _client(completions))
    parts = [{"type": "text", "text": "Product Description: 袜子"}]
    fmt = {"type": "json_object"}

    assert complete("sys", parts, model="m", temperature=0.2, response_format=fmt) == '{"grade": "S0"}'

    (sent,) = completions.kwargs
    assert sent["model"] == "m"
    assert sent["temperature"] == 0.2
    assert sent["response_format"] == fmt
    assert sent["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": parts},
    ]


def test_complete_omits_unset_options(monkeypatch: pytest.MonkeyPatch) -> None:
    completions = FakeCompletions(choices=[_choice("hi")])
    monkeypatch.setattr(llm, "get_client", lambda: _client(completions))
    complete("sys", "user", model="m")
    assert "temperature" not in completions.kwargs[0]
    assert "response_format" not in completions.kwargs[0]


def test_complete_without_choices_or_content(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(llm, "get_client", lambda: _client(FakeCompletions(choices=[])))
    assert complete("sys", "user", model="m") == ""
    monkeypatch.setattr(llm, "get_client", lambda: _client(FakeCompletions(choices=[_choice(None)])))
    assert complete("sys", "user", model="m") == ""


def test_complete_logs_and_reraises_api_errors(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    completions = FakeCompletions(error=RuntimeError("429 rate limited"))
    monkeypatch.setattr(llm, "get_client", lambda: _client(completions))
    with caplog.at_level(logging.ERROR, logger="moderator.llm"):
        with pytest.raises(RuntimeError, match="429"):
            complete("sys", "user", model="m")
    assert "429 rate limited" in caplog.text


def test_complete_uses_given_client(monkeypatch: pytest.MonkeyPatch) -> None:
    def no_client():
        raise AssertionError("a client was passed in")

    monkeypatch.setattr(llm, "get_client", no_client)
    completions = FakeCompletions(choices=[_choice("ok")])
    assert complete("sys", "user", model="m", client=_client(completions)) == "ok"
