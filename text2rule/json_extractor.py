"""Extract JSON objects from model output or other free text."""

import json
import re
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

JSON_BLOCK_PATTERN = re.compile(r"```json\s*(\{.*?\})\s*```", re.DOTALL)
GENERIC_BLOCK_PATTERN = re.compile(r"```\s*(\{.*?\})\s*```", re.DOTALL)


def extract_json_string(content: Optional[str]) -> Optional[str]:
    """
    Find a JSON object in text.

    Tries a ```json fenced block first, then any fenced block, then the span
    from the first '{' to the last '}'.
    """
    if not content:
        return None

    for pattern in (JSON_BLOCK_PATTERN, GENERIC_BLOCK_PATTERN):
        match = pattern.search(content)
        if match:
            return match.group(1)

    start = content.find("{")
    end = content.rfind("}")
    if start >= 0 and end > start:
        return content[start:end + 1]
    return None


def extract_json(content: Optional[str]) -> Optional[Dict[str, Any]]:
    """Extract and parse a JSON object; None when absent or malformed."""
    if not content or not content.strip():
        logger.warning("Content is empty, cannot extract JSON")
        return None

    json_str = extract_json_string(content)
    if json_str is None:
        logger.warning("No JSON found in content")
        return None

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON content [error={e}]")
        return None

    return parsed if isinstance(parsed, dict) else None
