"""Reading, writing and (de)serializing OpenAPI / Swagger documents.

Documents are plain dict trees as produced by PyYAML. Both YAML and JSON
files are read with the YAML loader; files are written back as JSON when
their extension says so and as YAML otherwise.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from spec_repo.errors import ParseError

LOGGER = logging.getLogger(__name__)

_MISSING = object()


class _NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that never emits anchors or aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def parse(text: str) -> dict:
    """Parse document text (YAML or JSON) into a dict."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"Can not parse OpenAPI file {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(f"Can not parse OpenAPI file: expected a mapping, got {type(data).__name__}")
    return data


def stringify(document: Any, fmt: str = "yaml") -> str:
    """Serialize a document as YAML or JSON text."""
    if fmt == "yaml":
        return yaml.dump(
            document,
            Dumper=_NoAliasDumper,
            indent=2,
            width=float("inf"),
            sort_keys=False,
            allow_unicode=True,
        )
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def read_yaml(file: Path) -> Any:
    """Load one structured file. Malformed content raises ParseError."""
    text = Path(file).read_text(encoding="utf-8")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"Can not parse {file}: {e}") from e


def read_yaml_or_default(file: Path, default: Any, message: str) -> Any:
    """Load a file, falling back to `default` only when it does not exist."""
    try:
        return read_yaml(file)
    except FileNotFoundError:
        LOGGER.warning(message)
        return default


def save_yaml(file: Path, obj: Any) -> None:
    file = Path(file)
    file.parent.mkdir(parents=True, exist_ok=True)
    fmt = "json" if file.suffix == ".json" else "yaml"
    file.write_text(stringify(obj, fmt), encoding="utf-8")


def update_yaml(file: Path, new_data: Any) -> bool:
    """Write `new_data` only if it differs from what the file holds.

    Returns True when the file was (re)written.
    """
    try:
        current = read_yaml(file)
    except (OSError, ParseError):
        current = _MISSING
    if current is not _MISSING and current == new_data:
        return False
    save_yaml(file, new_data)
    return True
