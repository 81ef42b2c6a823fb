"""
Batch response parsing.

Two stages, mirroring how the reply is produced:

1. JSON parse: the raw content must decode to a JSON object (or a bare array).
2. Schema: the object must carry an ``analyses`` array; every entry is
   validated on its own as a PostAnalysis.

Stage failures raise ResponseParseError. An individual entry that fails
validation becomes ``None`` at its position, so one bad entry never shifts
the positional mapping of its siblings.
"""

import json
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ValidationError

from sentiment_pipeline.models.records import PostAnalysis
from sentiment_pipeline.validation.exceptions import JSONParseError, SchemaValidationError

logger = structlog.get_logger(__name__)


class BatchAnalysisPayload(BaseModel):
    """Expected shape of a batch classification reply."""

    analyses: list[PostAnalysis]


def batch_analysis_schema() -> dict[str, Any]:
    """JSON Schema sent to providers that support constrained output."""
    return BatchAnalysisPayload.model_json_schema()


def parse_json_content(content: str) -> Any:
    """
    Stage 1: decode raw LLM content.

    Raises:
        JSONParseError: empty content, invalid JSON, or a scalar value
    """
    if not content or not content.strip():
        raise JSONParseError(
            "LLM response content is empty or whitespace-only",
            raw_content=content,
            parse_error="Empty content",
        )

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise JSONParseError(
            f"Failed to parse LLM response as JSON: {e.msg}",
            raw_content=content,
            parse_error=f"{e.msg} at line {e.lineno} col {e.colno}",
        ) from e

    if not isinstance(parsed, (dict, list)):
        raise JSONParseError(
            f"LLM response is not a JSON object (got {type(parsed).__name__})",
            raw_content=content,
            parse_error=f"Expected object, got {type(parsed).__name__}",
        )
    return parsed


def extract_analyses(content: str) -> list[Optional[PostAnalysis]]:
    """
    Parse a batch reply into positional analyses.

    Args:
        content: Raw LLM content

    Returns:
        One entry per array element, in order; ``None`` where the element
        failed validation

    Raises:
        JSONParseError: Content is not JSON
        SchemaValidationError: No analyses array found
    """
    parsed = parse_json_content(content)

    entries = parsed.get("analyses") if isinstance(parsed, dict) else parsed
    if not isinstance(entries, list):
        raise SchemaValidationError(
            "LLM response does not contain an 'analyses' array",
            found_type=type(entries).__name__,
        )

    analyses: list[Optional[PostAnalysis]] = []
    invalid_positions: list[int] = []
    for position, entry in enumerate(entries):
        try:
            analyses.append(PostAnalysis.model_validate(entry))
        except ValidationError:
            analyses.append(None)
            invalid_positions.append(position)

    if invalid_positions:
        logger.warning(
            "Discarded invalid analysis entries",
            invalid_positions=invalid_positions,
            entries_count=len(entries),
        )

    return analyses
