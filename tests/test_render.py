"""Golden cases for the result panel and Markdown report. No LLM."""
from moderator.render import build_result_view, render_report_markdown, rule_guide_rows, grade_cards
from moderator.schemas import AnalysisResult, ViolationAnalysis


def _s1_socks() -> AnalysisResult:
    return AnalysisResult(
        grade="S1",
        intervention="限流",
        core_logic="命中1条规则，轻微风险",
        summary="袜子纹理模拟生肉。",
        violations=[
            ViolationAnalysis(rule_id="R1", detected=True, reasoning="模拟生肉肌肉纹理。"),
            ViolationAnalysis(rule_id="R4", detected=False, reasoning="商品实物图 | 无扭曲。"),
        ],
    )


def test_view_for_single_hit() -> None:
    view = build_result_view(_s1_socks())
    assert view.grade_def.label == "【低质内容】"
    assert view.grade_def.color == "orange"
    assert view.detected_count == 1
    assert view.hits_label == "1 / 5"
    assert [(r.rule_id, r.rule_name, r.status) for r in view.rows] == [
        ("R1", "生理不适", "违规"),
        ("R4", "过度猎奇/恶搞", "通过"),
    ]


def test_view_for_clean_result_with_no_rows() -> None:
    result = AnalysisResult(grade="S0", intervention="正常推荐", core_logic="无命中", summary="正常。", violations=[])
    view = build_result_view(result)
    assert view.rows == []
    assert view.hits_label == "0 / 5"
    assert view.grade_def.intervention == "正常推荐"


def test_report_markdown() -> None:
    md = render_report_markdown(_s1_socks(), run_id="run-42", model_name="gpt-4o-mini")
    assert md.startswith("# 🟠 S1 【低质内容】")
    assert "| R1 | 生理不适 | 违规 | 模拟生肉肌肉纹理。 |" in md
    assert "商品实物图 \\| 无扭曲。" in md
    assert "- **命中规则数:** 1 / 5" in md
    assert "`run-42`" in md


def test_report_without_run_footer() -> None:
    md = render_report_markdown(_s1_socks())
    assert "Run ID" not in md


def test_rule_guide_rows_and_cards() -> None:
    rows = rule_guide_rows()
    assert [r["编号"] for r in rows] == ["R1", "R2", "R3", "R4", "R5"]
    assert rows[3]["客观判断标准"].count("• ") == 3
    assert [g for g, _ in grade_cards()] == ["S0", "S1", "S2"]
