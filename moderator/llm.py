"""LLM client wrapper: OpenAI, Gemini (OpenAI-compatible endpoint), Groq, or Ollama."""
import json
import logging
import os
from pathlib import Path
from typing import Any
from openai import OpenAI
from dotenv import load_dotenv

# Load .env from project root (parent of moderator/) so it works for both the CLI and streamlit
_project_root = Path(__file__).resolve().parent.parent
load_dotenv(_project_root / ".env")

logger = logging.getLogger(__name__)

GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta/openai/"
GROQ_BASE = "https://api.groq.com/openai/v1"
OLLAMA_BASE = "http://localhost:11434/v1"

DEFAULT_TEMPERATURE = 0.2

# Providers whose OpenAI-compatible API only accepts {"type": "json_object"}
JSON_OBJECT_ONLY = {"groq"}


class MissingApiKeyError(ValueError):
    """Raised before any request when the selected provider has no usable API key."""


def get_provider() -> str:
    return (os.getenv("LLM_PROVIDER") or "openai").strip().lower()


def _require_key(env_name: str, placeholder_prefix: str, hint: str) -> str:
    key = os.getenv(env_name)
    if not key or key.startswith(placeholder_prefix):
        raise MissingApiKeyError(f"API Key is missing. Set {env_name} in .env. {hint}")
    return key


def get_client() -> OpenAI:
    """Return OpenAI-compatible client based on LLM_PROVIDER in .env."""
    provider = get_provider()

    if provider == "gemini":
        key = _require_key("GEMINI_API_KEY", "REPLACE", "Get a key at https://aistudio.google.com/")
        return OpenAI(api_key=key, base_url=GEMINI_BASE)

    if provider == "groq":
        key = _require_key("GROQ_API_KEY", "gsk_REPLACE", "Get a free key at https://console.groq.com/")
        return OpenAI(api_key=key, base_url=GROQ_BASE)

    if provider == "ollama":
        # Ollama has no auth; use a placeholder key. Needs a vision model for image checks: ollama run llama3.2-vision
        return OpenAI(api_key="ollama", base_url=os.getenv("OLLAMA_BASE_URL", OLLAMA_BASE))

    # default: openai
    key = _require_key(
        "OPENAI_API_KEY",
        "sk-REPLACE",
        "Or switch provider: LLM_PROVIDER=gemini + GEMINI_API_KEY, LLM_PROVIDER=groq + GROQ_API_KEY, or LLM_PROVIDER=ollama.",
    )
    return OpenAI(api_key=key)


def get_model() -> str:
    """Return model name from env or default for current provider."""
    provider = get_provider()
    if provider == "gemini":
        return os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    if provider == "groq":
        return os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
    if provider == "ollama":
        return os.getenv("OLLAMA_MODEL", "llama3.2-vision")
    return os.getenv("OPENAI_MODEL", "gpt-4o-mini")


def get_temperature() -> float:
    raw = os.getenv("MODERATION_TEMPERATURE")
    if not raw:
        return DEFAULT_TEMPERATURE
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"MODERATION_TEMPERATURE must be a number, got {raw!r}")


def response_format_for(schema: dict, name: str, provider: str | None = None) -> dict:
    """Strict JSON-schema output where the provider supports it, plain JSON mode otherwise."""
    provider = provider or get_provider()
    if provider in JSON_OBJECT_ONLY:
        return {"type": "json_object"}
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "schema": schema, "strict": True},
    }


def complete(
    system: str,
    user: str | list[dict[str, Any]],
    model: str | None = None,
    temperature: float | None = None,
    response_format: dict | None = None,
    client: OpenAI | None = None,
) -> str:
    """
    Single completion. `user` is plain text or a list of multimodal content parts.
    Returns the assistant message content.
    """
    client = client or get_client()
    model = model or get_model()
    kwargs: dict[str, Any] = {}
    if temperature is not None:
        kwargs["temperature"] = temperature
    if response_format is not None:
        kwargs["response_format"] = response_format
    try:
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            **kwargs,
        )
    except Exception as e:
        logger.error("LLM request failed (model=%s): %s", model, e)
        raise
    if not resp.choices:
        return ""
    msg = resp.choices[0].message
    return msg.content or ""


def extract_json_from_response(text: str) -> dict:
    """
    Try to find a JSON object in the response (between ```json ... ``` or raw).
    Returns the parsed dict or raises ValueError.
    """
    text = text.strip()
    if "```json" in text:
        start = text.index("```json") + 7
        end = text.index("```", start)
        text = text[start:end].strip()
    elif "```" in text:
        start = text.index("```") + 3
        end = text.index("```", start)
        text = text[start:end].strip()
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data
