"""
Streamlit UI: upload a product image and/or paste its description, run the R1–R5 check,
see the grade banner, per-rule reasoning, and hit count.

Run: streamlit run app.py
"""
from pathlib import Path
import streamlit as st
from moderator.utils import generate_run_id, ensure_output_dir
from moderator.audit import log_event
from moderator.images import ALLOWED_IMAGE_TYPES
from moderator.llm import get_model
from moderator.render import build_result_view, grade_cards, render_report_markdown, rule_guide_rows
from moderator.workflow import (
    ModerationState,
    can_submit,
    clear_image,
    extract_text,
    set_description,
    set_image,
    submit,
)

PROJECT_ROOT = Path(__file__).resolve().parent
OUTPUTS = PROJECT_ROOT / "outputs"

BANNERS = {"green": st.success, "orange": st.warning, "red": st.error}


def _state() -> ModerationState:
    if "moderation" not in st.session_state:
        st.session_state.moderation = ModerationState()
        st.session_state.uploader_key = 0
        st.session_state.run_id = None
    return st.session_state.moderation


def _on_clear_image() -> None:
    clear_image(_state())
    # A new key is the only way to reset a file_uploader widget.
    st.session_state.uploader_key += 1


def _on_extract_text() -> None:
    state = _state()
    state.input.description = st.session_state.get("description", "")
    extract_text(state)
    st.session_state.description = state.input.description


def _sync_upload(state: ModerationState, uploaded) -> None:
    if uploaded is None:
        if state.input.image is not None:
            clear_image(state)
        return
    data = uploaded.getvalue()
    if data != state.input.image:
        set_image(state, data, uploaded.name, uploaded.type)


def _render_rule_guide() -> None:
    with st.expander("📖 审核规则参考 (Moderation Guidelines)", expanded=False):
        st.markdown("**规则定义 (Rules R1-R5)**")
        st.dataframe(rule_guide_rows(), use_container_width=True, hide_index=True)
        st.markdown("**干预模式**")
        for col, (grade, gd) in zip(st.columns(3), grade_cards()):
            with col:
                st.markdown(f"**{grade} {gd.label}**")
                st.caption(gd.intervention.split("：")[0])
                st.write(gd.intervention)
                st.markdown(f"*\"{gd.logic}\"*")


def _render_result(state: ModerationState) -> None:
    if state.result is None:
        st.info("请提交商品信息以查看审核结果")
        return

    view = build_result_view(state.result)
    gd = view.grade_def
    BANNERS[gd.color](f"### {gd.label}\n**{gd.intervention}**\n\n`{gd.logic}`")
    st.markdown("**AI 审核逻辑摘要:**")
    st.write(view.summary)

    rules_col, stats_col = st.columns([2, 1])
    with rules_col:
        st.subheader("规则命中详情")
        for row in view.rows:
            with st.container(border=True):
                mark = "🔴 违规" if row.detected else "✅ 通过"
                st.markdown(f"`{row.rule_id}` **{row.rule_name}** · {mark}")
                st.caption(row.reasoning)
    with stats_col:
        st.subheader("风险分布")
        st.metric("命中规则数", view.hits_label)
        st.markdown(f"**核心判定逻辑:** {view.core_logic}")

    run_id = st.session_state.run_id or ""
    st.download_button(
        "下载审核报告 (Markdown)",
        render_report_markdown(state.result, run_id, get_model()),
        file_name=f"moderation_{run_id or 'result'}.md",
        mime="text/markdown",
    )
    st.download_button(
        "下载原始结果 (JSON)",
        state.result.to_wire_json(),
        file_name=f"moderation_{run_id or 'result'}.json",
        mime="application/json",
    )


def _run_submit(state: ModerationState) -> None:
    run_id = generate_run_id()
    out_dir = ensure_output_dir(OUTPUTS, run_id)
    audit_path = out_dir / "audit.jsonl"
    st.session_state.run_id = run_id
    log_event(audit_path, run_id, "input_received", {
        "description_length": len(state.input.description),
        "image": state.input.image_name,
    })
    with st.spinner("正在进行 AI 智能审核... 正在校验 R1-R5 规则"):
        result = submit(state, audit_path=audit_path, run_id=run_id)
    if result is not None:
        (out_dir / "result.json").write_text(result.to_wire_json(), encoding="utf-8")
        log_event(audit_path, run_id, "outputs_written", {"grade": result.grade})


st.set_page_config(page_title="ContentModerator", layout="wide")
state = _state()

st.title("ContentModerator (内容审核)")
st.caption(f"Powered by {get_model()}")

if state.error:
    st.error(state.error)

_render_rule_guide()

form_col, result_col = st.columns([5, 7], gap="large")

with form_col:
    st.subheader("商品信息录入")
    uploaded = st.file_uploader(
        "商品主图 (Product Image)",
        type=ALLOWED_IMAGE_TYPES,
        key=f"uploader_{st.session_state.uploader_key}",
        help="支持 PNG, JPG",
    )
    _sync_upload(state, uploaded)
    if state.input.image is not None:
        st.image(state.input.image, use_container_width=True)
        btn_clear, btn_ocr = st.columns(2)
        btn_clear.button("删除图片", on_click=_on_clear_image, use_container_width=True)
        btn_ocr.button(
            "自动提取图中文字",
            on_click=_on_extract_text,
            disabled=state.is_extracting or state.is_loading,
            use_container_width=True,
        )

    description = st.text_area(
        "商品标题与描述 (Title & Description)",
        key="description",
        height=160,
        placeholder="例如：'搞怪T恤，印有特殊图案...' 或 '如何快速致富的秘籍...'",
    )
    set_description(state, description)

    if st.button("开始智能审核", type="primary", disabled=not can_submit(state), use_container_width=True):
        with result_col:
            _run_submit(state)
        st.rerun()

with result_col:
    _render_result(state)
