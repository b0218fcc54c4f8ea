"""
Data shapes for the moderation workflow.

- ProductInput: what the user submits (description and/or image).
- AnalysisResult: what the model returns (grade, per-rule reasoning, summary).

Field names are snake_case in Python; the model's JSON uses camelCase (ruleId, coreLogic),
handled with aliases so results round-trip in the model's own wire format.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from moderator.rules import RuleId, SafetyGrade


# --- Per-rule finding returned by the model ---

class ViolationAnalysis(BaseModel):
    """One rule check: whether the rule was hit and why (in Chinese)."""

    model_config = ConfigDict(populate_by_name=True)

    rule_id: RuleId = Field(alias="ruleId")
    detected: bool
    reasoning: str


# --- Full moderation result ---

class AnalysisResult(BaseModel):
    """Grade decided by the model plus the reasoning behind it. Not recomputed locally."""

    model_config = ConfigDict(populate_by_name=True)

    grade: SafetyGrade
    intervention: str
    core_logic: str = Field(alias="coreLogic")
    violations: List[ViolationAnalysis]
    summary: str

    def detected_violations(self) -> List[ViolationAnalysis]:
        return [v for v in self.violations if v.detected]

    def detected_count(self) -> int:
        return len(self.detected_violations())

    def to_wire_json(self, indent: int | None = 2) -> str:
        """Serialize with the model's field names (ruleId, coreLogic)."""
        return self.model_dump_json(by_alias=True, indent=indent)


# --- What the user submits ---

class ProductInput(BaseModel):
    description: str = ""
    image: Optional[bytes] = None
    image_name: Optional[str] = None
    image_preview: Optional[str] = None  # data:<mime>;base64,<payload>

    def has_content(self) -> bool:
        return bool(self.description) or self.image is not None
