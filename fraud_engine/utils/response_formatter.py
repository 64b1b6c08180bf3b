"""Helpers for pulling structured verdicts out of model responses."""

import json
import logging
import re
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*\n(.*?)\n?```", re.DOTALL)


class ResponseFormatter:
    """
    Utility class for extracting and normalising JSON verdicts.

    Models are asked to answer with a bare JSON object but often wrap it
    in markdown fences or surround it with prose; extraction tries the
    fenced block, then the whole text, then the first balanced object.
    """

    @staticmethod
    def extract_json_from_response(response_text: str) -> Optional[Dict[str, Any]]:
        """
        Extract a JSON object from a model response.

        Args:
            response_text: Raw response text that may contain JSON

        Returns:
            Parsed JSON dictionary, or None if no object could be found
        """
        if not response_text or not response_text.strip():
            logger.warning("Empty response text provided")
            return None

        text = response_text.strip()

        for match in _FENCED_BLOCK.finditer(text):
            data = ResponseFormatter._loads_object(match.group(1).strip())
            if data is not None:
                return data

        data = ResponseFormatter._loads_object(text)
        if data is not None:
            return data

        data = ResponseFormatter._extract_embedded_json(text)
        if data is None:
            logger.warning(f"Failed to extract JSON from response: {text[:200]}...")
        return data

    @staticmethod
    def _loads_object(text: str) -> Optional[Dict[str, Any]]:
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, ValueError):
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _extract_embedded_json(text: str) -> Optional[Dict[str, Any]]:
        """Find the first balanced ``{...}`` that parses as a JSON object."""
        start = text.find('{')
        while start != -1:
            depth = 0
            in_string = False
            escaped = False
            for i in range(start, len(text)):
                char = text[i]
                if escaped:
                    escaped = False
                    continue
                if char == '\\':
                    escaped = True
                    continue
                if char == '"':
                    in_string = not in_string
                    continue
                if in_string:
                    continue
                if char == '{':
                    depth += 1
                elif char == '}':
                    depth -= 1
                    if depth == 0:
                        data = ResponseFormatter._loads_object(text[start:i + 1])
                        if data is not None:
                            return data
                        break
            start = text.find('{', start + 1)
        return None

    @staticmethod
    def as_float(value: Any, default: float, lower: float = 0.0, upper: float = 1.0) -> float:
        """Coerce a model-supplied number, clamping it into ``[lower, upper]``."""
        if isinstance(value, bool) or value is None:
            return default
        try:
            number = float(value)
        except (TypeError, ValueError):
            return default
        if number != number:  # NaN
            return default
        return min(max(number, lower), upper)

    @staticmethod
    def as_str_list(value: Any) -> List[str]:
        """Coerce a model-supplied list of labels to a list of non-empty strings."""
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
