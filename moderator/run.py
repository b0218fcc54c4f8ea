"""
CLI: moderate one product without the browser.

  description and/or image → analyze (one LLM call) → result.json, report.md, audit.jsonl
"""
import argparse
from pathlib import Path
from moderator.utils import generate_run_id, read_text_file, read_image_file, ensure_output_dir
from moderator.audit import log_event
from moderator.images import mime_from_filename
from moderator.llm import get_model
from moderator.render import render_report_markdown
from moderator.rules import TOTAL_RULES
from moderator.schemas import AnalysisResult, ViolationAnalysis
from moderator.workflow import ModerationState, set_image, submit

DEMO_RESULT = AnalysisResult(
    grade="S1",
    intervention="限流：首页/热门不推，搜索降权",
    core_logic="命中1条规则，轻微风险",
    summary="商品主图为袜子实物，但纹理模拟生肉肌肉，可能引起部分用户生理不适；文字描述无违规。",
    violations=[
        ViolationAnalysis(rule_id="R1", detected=True, reasoning="袜子图案逼真模拟生牛肉肌肉纹理，易引发生理不适。"),
        ViolationAnalysis(rule_id="R2", detected=False, reasoning="未涉及任何人群或刻板印象。"),
        ViolationAnalysis(rule_id="R3", detected=False, reasoning="商品形态与使用场景无危险联想。"),
        ViolationAnalysis(rule_id="R4", detected=False, reasoning="主图为商品实物图，无扭曲或器官特写。"),
        ViolationAnalysis(rule_id="R5", detected=False, reasoning="标题与描述符合公序良俗。"),
    ],
)


def _demo_analyzer(description: str, image_base64: str | None, mime_type: str | None) -> AnalysisResult:
    return DEMO_RESULT


def run(
    description: str,
    image_path: str | None,
    out_base: str,
    demo: bool = False,
) -> AnalysisResult | None:
    run_id = generate_run_id()
    out_dir = ensure_output_dir(out_base, run_id)
    audit_path = out_dir / "audit.jsonl"

    state = ModerationState()
    state.input.description = description
    if image_path:
        set_image(state, read_image_file(image_path), Path(image_path).name, mime_from_filename(image_path))
    log_event(audit_path, run_id, "input_received", {
        "description_length": len(description),
        "image": image_path,
        "demo": demo,
    })

    result = submit(state, analyzer=_demo_analyzer if demo else None, audit_path=audit_path, run_id=run_id)
    if result is None:
        print(f"ERROR: {state.error} See {audit_path}.")
        return None

    model_name = "demo (no LLM)" if demo else get_model()
    (out_dir / "result.json").write_text(result.to_wire_json(), encoding="utf-8")
    (out_dir / "report.md").write_text(render_report_markdown(result, run_id, model_name), encoding="utf-8")
    log_event(audit_path, run_id, "outputs_written", {"grade": result.grade})

    if demo:
        print("(Demo mode: no LLM; used built-in result)")
    print(f"Run ID: {run_id}")
    print(f"Grade: {result.grade} ({result.detected_count()} / {TOTAL_RULES} rules hit)")
    print(f"Output folder: {out_dir}")
    return result


def main() -> None:
    p = argparse.ArgumentParser(description="Product content moderation: description/image → R1-R5 check → S0/S1/S2")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--description", default="", help="Product title and description")
    src.add_argument("--description-file", help="Path to a .txt with the title and description")
    p.add_argument("--image", help="Path to the product image (png/jpg)")
    p.add_argument("--out", default="outputs", help="Output folder")
    p.add_argument("--demo", action="store_true", help="Skip LLM; use built-in result")
    args = p.parse_args()
    description = read_text_file(args.description_file) if args.description_file else args.description
    run(description, args.image, args.out, demo=args.demo)


if __name__ == "__main__":
    main()
