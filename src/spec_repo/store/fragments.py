"""Fragment store: a directory of same-format files seen as one mapping.

Each file under a fragment directory holds a single entity. The file's
location relative to the directory is decoded into an object key by a
caller-supplied function, which gives a flat key -> file mapping.
"""

import logging
from collections.abc import Callable, Hashable
from pathlib import Path
from typing import Any

from spec_repo.document import read_yaml, update_yaml
from spec_repo.errors import DuplicateKeyError

LOGGER = logging.getLogger(__name__)

STRUCTURED_SUFFIXES = (".yaml", ".yml", ".json")

# Recursive match on any structured file.
ANY_YAML = "**/*"


def base_name(path: Path) -> str:
    """File name without directory or extension."""
    return Path(path).stem


def glob_object(
    directory: Path,
    pattern: str,
    key_fn: Callable[[Path], Hashable],
    suffixes: tuple[str, ...] | None = None,
) -> dict[Hashable, Path]:
    """Map each file matched by `pattern` under `directory` to its object key.

    `key_fn` receives the path relative to `directory`. Two files that
    decode to the same key raise DuplicateKeyError.
    """
    directory = Path(directory)
    result: dict[Hashable, Path] = {}
    for path in sorted(directory.glob(pattern)):
        if not path.is_file():
            continue
        if suffixes is not None and path.suffix not in suffixes:
            continue
        key = key_fn(path.relative_to(directory))
        if key in result:
            raise DuplicateKeyError(f"{_format_key(key)} definition already exists ({result[key]}, {path})")
        result[key] = path
    return result


def glob_yaml_object(directory: Path, key_fn: Callable[[Path], Hashable]) -> dict[Hashable, Any]:
    """Like glob_object over structured files, with each file parsed."""
    files = glob_object(directory, ANY_YAML, key_fn, STRUCTURED_SUFFIXES)
    return {key: read_yaml(path) for key, path in files.items()}


def update_glob_object(directory: Path, obj: dict[str, Any]) -> None:
    """Reconcile `directory` with `obj`: one file per key, nothing else.

    Files already mapped to a key keep their name and extension; new keys
    get `<key>.yaml`. Files are only rewritten when their parsed content
    changed. Files whose key is gone from `obj` are deleted.
    """
    directory = Path(directory)
    known = glob_object(directory, ANY_YAML, base_name, STRUCTURED_SUFFIXES)

    for key, value in obj.items():
        filename = known.pop(key, None) or directory / f"{key}.yaml"
        update_yaml(filename, value)

    for orphan in known.values():
        LOGGER.info("Removing orphaned fragment %s", orphan)
        orphan.unlink()


def _format_key(key: Hashable) -> str:
    if isinstance(key, tuple):
        return ".".join(str(k) for k in key)
    return str(key)
