"""Derive JSON paths from the sample input for completion."""

import json
import re
from typing import Any, Optional, Union

from .models import JsonPath

MAX_DEPTH = 10
ARRAY_SAMPLE_SIZE = 3

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def extend_selector(selector: str, step: Union[int, str]) -> str:
    """Append one array index or object key to a jq selector.

    Indexes become ``[i]``, identifier-safe keys ``.key`` and any other
    key ``["key"]``, so keys such as ``"a.b"`` or ``"0"`` stay one step.
    """
    if isinstance(step, int):
        return f"{selector}[{step}]"
    if IDENTIFIER_RE.match(step):
        return selector + step if selector == "." else f"{selector}.{step}"
    return f"{selector}[{json.dumps(step, ensure_ascii=False)}]"


def extract_json_paths(data: Any, prefix: str = "", max_depth: int = MAX_DEPTH, depth: int = 0,
                       selector: str = ".") -> list:
    """Walk the sample JSON and return every path worth suggesting.

    Arrays contribute their own path and up to ARRAY_SAMPLE_SIZE elements;
    objects contribute their own path (except the root) and each key.

    Args:
        data: Parsed JSON value.
        prefix: Display path of ``data`` within the document.
        max_depth: Nesting depth at which the walk stops.
        selector: jq selector reaching ``data``.

    Returns:
        List of JsonPath in document order.
    """
    if depth >= max_depth or data is None:
        return []

    paths = []

    if isinstance(data, list):
        array_path = prefix or "."
        paths.append(JsonPath(array_path, selector, "array", data))

        for i, item in enumerate(data[:ARRAY_SAMPLE_SIZE]):
            element_path = f"{array_path}[{i}]"
            element_selector = extend_selector(selector, i)
            if isinstance(item, (dict, list)):
                paths.extend(extract_json_paths(item, element_path, max_depth, depth + 1, element_selector))
            else:
                paths.append(JsonPath(element_path, element_selector, "primitive", item))

    elif isinstance(data, dict):
        if prefix:
            paths.append(JsonPath(prefix, selector, "object", data))

        for key, value in data.items():
            full_path = f"{prefix}.{key}"
            key_selector = extend_selector(selector, key)
            if isinstance(value, (dict, list)):
                paths.extend(extract_json_paths(value, full_path, max_depth, depth + 1, key_selector))
            else:
                paths.append(JsonPath(full_path, key_selector, "primitive", value))

    return paths


class JsonPathCache:
    """Paths of the current sample, recomputed only when the sample changes."""

    def __init__(self, max_depth: int = MAX_DEPTH):
        self.max_depth = max_depth
        self._sample_text: Optional[str] = None
        self._paths: list = []

    def paths_for(self, sample_text: str) -> list:
        """Return paths for ``sample_text``; invalid JSON yields no paths."""
        if sample_text != self._sample_text:
            self._paths = self._compute(sample_text)
            self._sample_text = sample_text
        return list(self._paths)

    def invalidate(self) -> None:
        self._sample_text = None
        self._paths = []

    def _compute(self, sample_text: str) -> list:
        try:
            data = json.loads(sample_text)
        except (TypeError, json.JSONDecodeError):
            return []
        return extract_json_paths(data, max_depth=self.max_depth)
