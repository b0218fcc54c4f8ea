"""
Analysis step: description and/or image → AnalysisResult.

The grade is decided entirely by the model from the rule catalog in SYSTEM_INSTRUCTION;
this module only assembles the multimodal request and validates the JSON that comes back.
"""
from pathlib import Path
from typing import Any
from pydantic import ValidationError
from moderator.schemas import AnalysisResult
from moderator.prompts import (
    SYSTEM_INSTRUCTION,
    RESPONSE_SCHEMA,
    RESPONSE_SCHEMA_NAME,
    OCR_INSTRUCTION,
    NO_IMAGE_NOTE,
)
from moderator.llm import complete, extract_json_from_response, get_client, get_model, get_temperature, response_format_for
from moderator.audit import log_event


class AnalysisError(ValueError):
    """The model answered, but not with a usable moderation result."""


def image_part(image_base64: str, mime_type: str) -> dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{image_base64}"}}


def build_user_parts(
    description: str | None,
    image_base64: str | None,
    image_mime_type: str | None,
) -> list[dict[str, Any]]:
    """Description text first, then the image (or a note that only text is available)."""
    parts: list[dict[str, Any]] = []
    if description:
        parts.append({"type": "text", "text": f"Product Description: {description}"})
    if image_base64 and image_mime_type:
        parts.append(image_part(image_base64, image_mime_type))
    else:
        parts.append({"type": "text", "text": NO_IMAGE_NOTE})
    return parts


def parse_result(raw: str) -> AnalysisResult:
    """Raw model text → AnalysisResult. Raises AnalysisError on empty, non-JSON, or off-schema output."""
    if not raw or not raw.strip():
        raise AnalysisError("Empty response from AI")
    try:
        data = extract_json_from_response(raw)
        return AnalysisResult.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise AnalysisError(f"Model output does not match the moderation schema: {e}") from e


def analyze_product_content(
    description: str | None,
    image_base64: str | None,
    image_mime_type: str | None,
    audit_path: Path | None = None,
    run_id: str = "",
) -> AnalysisResult:
    """Send one moderation request and return the validated result."""
    # Fails here, before the request is built, when the provider has no key.
    client = get_client()
    model_name = get_model()
    parts = build_user_parts(description, image_base64, image_mime_type)
    if audit_path:
        log_event(audit_path, run_id, "analysis_requested", {
            "description_length": len(description or ""),
            "has_image": bool(image_base64 and image_mime_type),
            "mime_type": image_mime_type,
        }, model_name=model_name)

    try:
        raw = complete(
            SYSTEM_INSTRUCTION,
            parts,
            model=model_name,
            temperature=get_temperature(),
            response_format=response_format_for(RESPONSE_SCHEMA, RESPONSE_SCHEMA_NAME),
            client=client,
        )
        result = parse_result(raw)
    except Exception as e:
        if audit_path:
            log_event(audit_path, run_id, "failure", {"stage": "analysis", "error": str(e)}, model_name=model_name)
        raise

    if audit_path:
        log_event(audit_path, run_id, "analysis_ok", {
            "grade": result.grade,
            "detected": [v.rule_id for v in result.detected_violations()],
        }, model_name=model_name)
    return result


def extract_text_from_image(image_base64: str, mime_type: str) -> str:
    """Read the visible text off a product image. Returns "" when there is none."""
    raw = complete(
        OCR_INSTRUCTION,
        [
            {"type": "text", "text": "Extract all visible text from this product image."},
            image_part(image_base64, mime_type),
        ],
        temperature=0.0,
    )
    return raw.strip()
