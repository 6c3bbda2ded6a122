"""Plugin pipeline: run every plugin unit against a document, in order.

For each unit: `init`, then `process` once per node matched by its
JSONPath expression, then `finish`. Plugins mutate the document in
place and later matches (and later plugins) see those mutations.
"""

import logging
from pathlib import Path
from typing import Any

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_jsonpath
from jsonpath_ng.jsonpath import DatumInContext, Fields, Index

from spec_repo.config import resolve_plugins_dir
from spec_repo.errors import PluginError
from spec_repo.plugins.loader import PluginUnit, discover_plugins

LOGGER = logging.getLogger(__name__)

Location = list[Any]


def run_plugins(spec: dict, options: Any = None, plugins_dir: Path | None = None) -> None:
    """Discover plugins and apply them to `spec`.

    Without an explicit `plugins_dir` the directory comes from
    `options.plugins_dir`, falling back to the default. Does nothing when
    the plugins directory does not exist.
    """
    if plugins_dir is None:
        configured = getattr(options, "plugins_dir", None)
        plugins_dir = resolve_plugins_dir(configured) if configured else resolve_plugins_dir()
    for unit in discover_plugins(plugins_dir):
        apply_plugin(unit, spec, options)


def apply_plugin(unit: PluginUnit, spec: dict, options: Any = None) -> None:
    if unit.init is not None:
        unit.init(spec, options)

    for location in find_locations(spec, unit.path_expression):
        keys = location[1:]
        if not keys:
            unit.process(None, None, location, spec)
            continue
        found, parent = _resolve(spec, keys[:-1])
        if not found:
            LOGGER.debug("Plugin %s: %s vanished before processing", unit.name, location)
            continue
        unit.process(parent, keys[-1], location, spec)

    if unit.finish is not None:
        unit.finish(spec)


def find_locations(spec: dict, expression: str) -> list[Location]:
    """Evaluate a JSONPath expression; each location is `["$", key, ...]`.

    Locations come back in the query engine's traversal order.
    """
    try:
        compiled = parse_jsonpath(expression)
    except JSONPathError as e:
        raise PluginError(f"Invalid path expression {expression!r}: {e}") from e
    return [_location(match) for match in compiled.find(spec)]


def _location(match: DatumInContext) -> Location:
    keys: list[Any] = []
    datum = match
    while datum.context is not None:
        step = datum.path
        if isinstance(step, Index):
            # jsonpath-ng >= 1.7 keeps a tuple of indices
            indices = getattr(step, "indices", None)
            keys.append(indices[0] if indices else step.index)
        elif isinstance(step, Fields):
            keys.append(step.fields[0])
        else:
            raise PluginError(f"Unsupported path step {step!r}")
        datum = datum.context
    keys.append("$")
    keys.reverse()
    return keys


def _resolve(spec: Any, keys: list[Any]) -> tuple[bool, Any]:
    node = spec
    for key in keys:
        try:
            node = node[key]
        except (KeyError, IndexError, TypeError):
            return False, None
    return True, node
