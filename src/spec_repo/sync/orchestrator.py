"""Sync orchestrator: reconcile an externally supplied document with a spec root.

Flat roots (no fragment directories) just get the raw text written to
their main file. Fragmented roots get the document merged with their
current children, passed through the plugin pipeline, and split back
into files, children included.
"""

import logging

from spec_repo.bundle.bundler import bundle_children
from spec_repo.bundle.options import BundleOptions
from spec_repo.document import parse
from spec_repo.layout.base import SpecLayout
from spec_repo.layout.resolver import resolve_layout
from spec_repo.plugins.pipeline import run_plugins
from spec_repo.split.splitter import split
from spec_repo.sync.registry import RouteRegistry

LOGGER = logging.getLogger(__name__)


def sync(
    spec: str | dict,
    options: BundleOptions | None = None,
    registry: RouteRegistry | None = None,
) -> None:
    """Replace the document of the root at `options.basedir` with `spec`.

    `spec` is either raw document text or an already parsed document.
    Newly split child roots are mounted in `registry` when one is given.
    """
    options = (options or BundleOptions()).model_copy(update={"action": "put"})
    layout = resolve_layout(options.basedir)

    if isinstance(spec, str):
        if not layout.has_fragments():
            LOGGER.info("Writing flat spec to %s", layout.main_file)
            layout.main_file.parent.mkdir(parents=True, exist_ok=True)
            layout.main_file.write_text(spec, encoding="utf-8")
            return
        spec = parse(spec)
    else:
        spec = dict(spec)

    if not options.skip_plugins:
        if layout.children is not None:
            incoming = spec.get("children") or {}
            children = bundle_children(layout, skip_code_samples=True, skip_headers_inlining=True)
            spec["children"] = {**children, **incoming}
        run_plugins(spec, options)
        _split_children(spec.pop("children", None) or {}, layout, registry)

    split(spec, layout)


def _split_children(children: dict, layout: SpecLayout, registry: RouteRegistry | None) -> None:
    """Persist each child document as a nested root below `layout`.

    A child is split and mounted before its own children, so that their
    parent directory and route namespace already exist.
    """
    # Child keys are lowercased when bundled; map them back onto existing dirs.
    existing = {layout.relative_child_name(c).lower(): c for c in layout.children or []}
    for key, child in children.items():
        child_layout = resolve_layout(existing.get(key.lower(), layout.basedir + key))
        child = dict(child)
        grandchildren = child.pop("children", None) or {}

        created = split(child, child_layout)
        LOGGER.info("%s child spec %s", "Created" if created else "Updated", child_layout.basedir)
        if registry is not None:
            registry.mount_child(child_layout.basedir)

        _split_children(grandchildren, child_layout, registry)
