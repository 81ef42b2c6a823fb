"""
Validation of batch classification replies.

- response_parser.py: JSON parse + per-entry schema validation
- exceptions.py: ResponseParseError hierarchy
"""

from sentiment_pipeline.validation.exceptions import (
    JSONParseError,
    ResponseParseError,
    SchemaValidationError,
)
from sentiment_pipeline.validation.response_parser import (
    BatchAnalysisPayload,
    batch_analysis_schema,
    extract_analyses,
    parse_json_content,
)

__all__ = [
    "BatchAnalysisPayload",
    "batch_analysis_schema",
    "extract_analyses",
    "parse_json_content",
    "JSONParseError",
    "ResponseParseError",
    "SchemaValidationError",
]
