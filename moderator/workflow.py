"""
Form state and its transitions: set/clear image, extract text from the image, submit.

The Streamlit page keeps one ModerationState in st.session_state and routes every
widget action through these functions; the CLI uses submit() directly.
"""
import logging
from pathlib import Path
from typing import Callable, Optional
from pydantic import BaseModel, Field
from moderator.schemas import AnalysisResult, ProductInput
from moderator.images import split_data_url, to_data_url, DEFAULT_OCR_MIME
from moderator.analyze import analyze_product_content, extract_text_from_image
from moderator.audit import log_event

logger = logging.getLogger(__name__)

MISSING_INPUT_ERROR = "请至少提供商品描述或商品图片。"
ANALYSIS_FAILED_ERROR = "审核分析过程中发生错误，请重试。请检查 API Key 是否配置正确。"
EXTRACTED_TEXT_PREFIX = "[图片提取文字]: "

Analyzer = Callable[[str, Optional[str], Optional[str]], AnalysisResult]
TextExtractor = Callable[[str, str], str]


class ModerationState(BaseModel):
    input: ProductInput = Field(default_factory=ProductInput)
    result: Optional[AnalysisResult] = None
    is_loading: bool = False
    is_extracting: bool = False
    error: Optional[str] = None


def can_submit(state: ModerationState) -> bool:
    """Submit is disabled while a call is in flight or when there is nothing to check."""
    return not state.is_loading and not state.is_extracting and state.input.has_content()


def set_description(state: ModerationState, description: str) -> None:
    state.input.description = description


def set_image(state: ModerationState, data: bytes, name: str | None, mime_type: str | None) -> None:
    state.input.image = data
    state.input.image_name = name
    state.input.image_preview = to_data_url(data, mime_type)


def clear_image(state: ModerationState) -> None:
    state.input.image = None
    state.input.image_name = None
    state.input.image_preview = None


def merge_extracted_text(description: str, text: str) -> str:
    if description:
        return f"{description}\n\n{EXTRACTED_TEXT_PREFIX}{text}"
    return text


def extract_text(state: ModerationState, extractor: TextExtractor = extract_text_from_image) -> None:
    """OCR the current image into the description. Failures leave the description untouched."""
    if not state.input.image_preview:
        return
    state.is_extracting = True
    try:
        image_base64, mime_type = split_data_url(state.input.image_preview)
        if image_base64 is not None:
            text = extractor(image_base64, mime_type or DEFAULT_OCR_MIME)
            if text:
                state.input.description = merge_extracted_text(state.input.description, text)
    except Exception as e:
        logger.error("Failed to extract text: %s", e)
    finally:
        state.is_extracting = False


def submit(
    state: ModerationState,
    analyzer: Analyzer | None = None,
    audit_path: Path | None = None,
    run_id: str = "",
) -> Optional[AnalysisResult]:
    """
    Run one moderation call for the current input.

    Sets state.error instead of raising; the loading flag is always cleared on return.
    """
    if not state.input.has_content():
        state.error = MISSING_INPUT_ERROR
        return None

    state.is_loading = True
    state.error = None
    state.result = None
    try:
        image_base64: str | None = None
        mime_type: str | None = None
        if state.input.image_preview and state.input.image is not None:
            image_base64, mime_type = split_data_url(state.input.image_preview)

        if analyzer is None:
            result = analyze_product_content(
                state.input.description, image_base64, mime_type, audit_path=audit_path, run_id=run_id
            )
        else:
            result = analyzer(state.input.description, image_base64, mime_type)
        state.result = result
        return result
    except Exception as e:
        logger.error("Moderation failed: %s", e)
        if audit_path:
            log_event(audit_path, run_id, "submit_failed", {"error": str(e)})
        state.error = ANALYSIS_FAILED_ERROR
        return None
    finally:
        state.is_loading = False
