from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, Tuple, Type, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Greedy on purpose: first "{" to last "}" so nested objects and code fences survive.
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json(
    raw_text: Any,
    fallback: T,
    expect: Optional[Union[Type, Tuple[Type, ...]]] = dict,
) -> Any:
    """
    Best-effort parse of the JSON object embedded in model output.

    Returns `fallback` when there is no `{...}` span, the span is not valid JSON,
    the input is not a string, or the parsed value is not an instance of `expect`
    (pass expect=None to accept any JSON value). Never raises.
    """
    if not isinstance(raw_text, str):
        return fallback

    m = _OBJECT_RE.search(raw_text)
    if m is None:
        logger.debug("no JSON object in model output (%d chars)", len(raw_text))
        return fallback

    try:
        parsed = json.loads(m.group(0))
    except (ValueError, RecursionError):
        logger.debug("malformed JSON in model output (%d chars)", len(raw_text))
        return fallback

    if expect is not None and not isinstance(parsed, expect):
        return fallback
    return parsed
