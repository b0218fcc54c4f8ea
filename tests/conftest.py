import json
import pytest


@pytest.fixture
def openai_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Default provider with a syntactically valid key; no request ever leaves the test."""
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    monkeypatch.delenv("MODERATION_TEMPERATURE", raising=False)


@pytest.fixture
def s2_payload() -> dict:
    return {
        "grade": "S2",
        "intervention": "过滤：推荐流拦截，搜索降权+提示",
        "coreLogic": "命中3条规则",
        "summary": "猪脸T恤涉及人身攻击，且主图为PS拼贴。",
        "violations": [
            {"ruleId": "R1", "detected": False, "reasoning": "无血腥元素。"},
            {"ruleId": "R2", "detected": True, "reasoning": "将人脸替换为猪脸，暗示贬义。"},
            {"ruleId": "R3", "detected": False, "reasoning": "无危险联想。"},
            {"ruleId": "R4", "detected": True, "reasoning": "主图为PS拼贴。"},
            {"ruleId": "R5", "detected": True, "reasoning": "标题带有嘲讽导向。"},
        ],
    }


@pytest.fixture
def s2_raw(s2_payload: dict) -> str:
    return json.dumps(s2_payload, ensure_ascii=False)
