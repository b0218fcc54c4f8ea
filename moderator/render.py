"""
Presentation of a moderation result: view model for the result panel, rule guide rows,
and a Markdown report (the same content, for the CLI and the download button).
"""
from pydantic import BaseModel
from moderator.rules import RULES, GRADE_DEFINITIONS, TOTAL_RULES, GradeDefinition, get_grade, get_rule
from moderator.schemas import AnalysisResult

STATUS_DETECTED = "违规"
STATUS_PASSED = "通过"

GRADE_ICONS = {"green": "🟢", "orange": "🟠", "red": "🔴"}


class ViolationRow(BaseModel):
    rule_id: str
    rule_name: str
    detected: bool
    status: str
    reasoning: str


class ResultView(BaseModel):
    grade: str
    grade_def: GradeDefinition
    summary: str
    core_logic: str
    rows: list[ViolationRow]
    detected_count: int
    total_rules: int = TOTAL_RULES

    @property
    def hits_label(self) -> str:
        return f"{self.detected_count} / {self.total_rules}"


def _rule_name(rule_id: str) -> str:
    try:
        return get_rule(rule_id).name
    except KeyError:
        return ""


def build_result_view(result: AnalysisResult) -> ResultView:
    """Rows keep the model's order; rule names come from the local catalog."""
    rows = [
        ViolationRow(
            rule_id=v.rule_id,
            rule_name=_rule_name(v.rule_id),
            detected=v.detected,
            status=STATUS_DETECTED if v.detected else STATUS_PASSED,
            reasoning=v.reasoning,
        )
        for v in result.violations
    ]
    return ResultView(
        grade=result.grade,
        grade_def=get_grade(result.grade),
        summary=result.summary,
        core_logic=result.core_logic,
        rows=rows,
        detected_count=result.detected_count(),
    )


def rule_guide_rows() -> list[dict[str, str]]:
    """Rows for the rule reference table (编号 / 类型 / 客观判断标准)."""
    return [
        {"编号": r.id, "类型": r.name, "客观判断标准": "\n".join(f"• {c}" for c in r.criteria)}
        for r in RULES
    ]


def grade_cards() -> list[tuple[str, GradeDefinition]]:
    return list(GRADE_DEFINITIONS.items())


def _md_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def render_report_markdown(result: AnalysisResult, run_id: str = "", model_name: str = "") -> str:
    """Markdown report of one result. No LLM involved."""
    view = build_result_view(result)
    gd = view.grade_def
    lines = [
        f"# {GRADE_ICONS[gd.color]} {view.grade} {gd.label}",
        "",
        f"- **干预策略:** {gd.intervention}",
        f"- **判定逻辑:** {gd.logic}",
        f"- **模型给出的干预:** {result.intervention}",
        "",
        "## AI 审核逻辑摘要",
        view.summary or "(无)",
        "",
        "## 规则命中详情",
    ]
    if view.rows:
        lines.append("| 编号 | 类型 | 结果 | 理由 |")
        lines.append("| --- | --- | --- | --- |")
        for row in view.rows:
            lines.append(f"| {row.rule_id} | {row.rule_name} | {row.status} | {_md_cell(row.reasoning)} |")
    else:
        lines.append("- (无)")
    lines.append("")
    lines.append("## 风险分布")
    lines.append(f"- **核心判定逻辑:** {view.core_logic}")
    lines.append(f"- **命中规则数:** {view.hits_label}")
    if run_id or model_name:
        lines.append("")
        lines.append("---")
        lines.append(f"*Run ID:* `{run_id}` | *Model:* {model_name}")
    return "\n".join(lines)
