"""
Prompts and the structured-output schema sent with every moderation call.

The system instruction is built from moderator.rules so the rule text the model sees
is exactly what the rule guide shows.
"""
from moderator.rules import RULES, RULE_IDS, GRADES, RuleDefinition


def _format_rule(rule: RuleDefinition) -> str:
    return (
        f"\n- {rule.id} ({rule.name}):\n"
        f"  - Criteria: {'; '.join(rule.criteria)}\n"
        f"  - Examples: {'; '.join(rule.examples)}\n"
    )


def build_system_instruction(rules: list[RuleDefinition] | None = None) -> str:
    rules = RULES if rules is None else rules
    return f"""
You are an expert Content Safety Moderator for an e-commerce platform (电商平台内容审核专家).
Your task is to evaluate a product based on its **Image** and **Description** against specific safety rules (R1-R5).

**IMPORTANT:**
1. You must use BOTH the product image and the product description to check against ALL rules (R1, R2, R3, R4, R5). Do not limit specific inputs to specific rules.
2. All reasoning, summaries, and logic explanations in the JSON output MUST be in **Simplified Chinese (简体中文)**.

**Rules Definition:**
{''.join(_format_rule(r) for r in rules)}
**Grading Logic:**
- **S0**: No R1-R5 issues found (无任何R1-R5问题).
  - Intervention: Normal recommendation (正常推荐).
- **S1**: Meets exactly 1 rule from R1-R5, and it is NOT a severe risk.
  - Intervention: Restricted visibility (限流).
- **S2**: Meets 3 or more rules, OR contains a single EXTREMELY SEVERE violation (or meets 2 severe rules).
  - Intervention: Filtered/Blocked (过滤/拦截).

**Output Format:**
Return the result strictly in JSON format matching the schema.
"""


SYSTEM_INSTRUCTION = build_system_instruction()

# Strict JSON-schema mode requires every property listed in "required" and no extras.
RESPONSE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "grade": {
            "type": "string",
            "enum": list(GRADES),
            "description": "The final safety grade S0, S1, or S2.",
        },
        "intervention": {
            "type": "string",
            "description": "The intervention strategy based on the grade (in Chinese).",
        },
        "coreLogic": {
            "type": "string",
            "description": "Short explanation of the core logic for this decision (e.g., '命中1条规则，轻微风险'). In Chinese.",
        },
        "summary": {
            "type": "string",
            "description": "A brief summary of the findings (in Chinese).",
        },
        "violations": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "ruleId": {"type": "string", "enum": list(RULE_IDS)},
                    "detected": {"type": "boolean"},
                    "reasoning": {
                        "type": "string",
                        "description": "Why this rule was triggered or not triggered (in Chinese).",
                    },
                },
                "required": ["ruleId", "detected", "reasoning"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["grade", "intervention", "coreLogic", "violations", "summary"],
    "additionalProperties": False,
}

RESPONSE_SCHEMA_NAME = "moderation_result"

OCR_INSTRUCTION = """You read product images for a moderation team.
Return ONLY the text that is visible in the image, verbatim, keeping its original language and line breaks.
Do not describe the image, translate, or add commentary. If there is no readable text, return an empty response."""

NO_IMAGE_NOTE = "[No image provided, analyze text only]"
