"""Plugin loader: turns every Python module in the plugins directory into a PluginUnit.

A plugin module exposes:

    path_expression = "$.paths.*.*"          # JSONPath, required

    def process(parent, key, full_path, document): ...   # required
    def init(document, options): ...                     # optional
    def finish(document): ...                            # optional

Modules are loaded fresh on every call; nothing is cached between runs.
"""

import importlib.util
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from spec_repo.errors import PluginError

LOGGER = logging.getLogger(__name__)


class PluginUnit(BaseModel):
    """A discovered transformation with its lifecycle hooks."""

    name: str
    path_expression: str
    process: Callable[..., Any]
    init: Callable[..., Any] | None = None
    finish: Callable[..., Any] | None = None


def discover_plugins(plugins_dir: Path) -> list[PluginUnit]:
    """Load all plugin modules from `plugins_dir`, in file name order.

    Files starting with an underscore are skipped. A missing directory
    yields no plugins.
    """
    plugins_dir = Path(plugins_dir)
    if not plugins_dir.is_dir():
        return []

    units = []
    for path in sorted(plugins_dir.glob("*.py")):
        if path.name.startswith("_"):
            continue
        units.append(load_plugin(path))
    return units


def load_plugin(path: Path) -> PluginUnit:
    """Execute one plugin module and wrap its hooks."""
    module_spec = importlib.util.spec_from_file_location(f"spec_repo_plugin_{path.stem}", path)
    if module_spec is None or module_spec.loader is None:
        raise PluginError(f"Can not load plugin {path}")
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)

    path_expression = getattr(module, "path_expression", None)
    process = getattr(module, "process", None)
    if not isinstance(path_expression, str) or not callable(process):
        raise PluginError(f"Plugin {path} must define `path_expression` and `process`")

    LOGGER.debug("Loaded plugin %s (%s)", path.stem, path_expression)
    return PluginUnit(
        name=path.stem,
        path_expression=path_expression,
        process=process,
        init=getattr(module, "init", None),
        finish=getattr(module, "finish", None),
    )
