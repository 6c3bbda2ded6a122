"""One-shot inlining of references into the top-level `headers` section."""

import copy
from typing import Any

from jsonpointer import resolve_pointer

HEADERS_REF_PREFIX = "#/headers"


def inline_headers(spec: dict) -> None:
    """Replace every `{"$ref": "#/headers/..."}` node by the referenced value.

    Other references are left alone. The `headers` section is removed
    afterwards.
    """
    for key, value in list(spec.items()):
        spec[key] = _inline(value, spec)
    spec.pop("headers", None)


def _inline(node: Any, spec: dict) -> Any:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith(HEADERS_REF_PREFIX):
            return copy.deepcopy(resolve_pointer(spec, ref[1:]))
        for key, value in list(node.items()):
            node[key] = _inline(value, spec)
        return node
    if isinstance(node, list):
        return [_inline(item, spec) for item in node]
    return node
