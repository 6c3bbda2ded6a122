"""Bundler: assemble one in-memory document from a spec root.

Steps, in order (each after the first can be skipped via BundleOptions):
main file, paths fragments, components/definitions fragments, code
samples, header inlining, plugins, child roots.
"""

import logging
from pathlib import Path

from spec_repo.bundle.code_samples import bundle_code_samples
from spec_repo.bundle.headers import inline_headers
from spec_repo.bundle.options import BundleOptions
from spec_repo.document import parse, read_yaml, stringify
from spec_repo.errors import ConflictError, ParseError
from spec_repo.layout.base import OPENAPI3_COMPONENTS, SpecLayout
from spec_repo.layout.codec import filename_to_path
from spec_repo.layout.resolver import resolve_layout
from spec_repo.plugins.pipeline import run_plugins
from spec_repo.store.fragments import base_name, glob_yaml_object

LOGGER = logging.getLogger(__name__)

EDITOR_BANNER = (
    "# Note: This spec is defined in multiple files.\n"
    "# All comments and formating were lost during the bundle process.\n"
    "# Existing files formatting may be not preserved on save.\n"
)


def _path_key(relative: Path) -> str:
    return filename_to_path(base_name(relative))


def read_main_file(main_file: Path) -> dict:
    spec = read_yaml(main_file)
    if spec is None:
        return {}
    if not isinstance(spec, dict):
        raise ParseError(f"Can not parse {main_file}: expected a mapping")
    return spec


def bundle(options: BundleOptions | None = None) -> dict:
    """Build the full document for the root at `options.basedir`."""
    options = options or BundleOptions()
    layout = resolve_layout(options.basedir)
    spec = read_main_file(layout.main_file)

    if layout.paths_dir.is_dir():
        LOGGER.debug("[spec] Adding paths to spec")
        if spec.get("paths") is not None:
            raise ConflictError(f"All paths should be defined inside {layout.paths_dir}")
        spec["paths"] = glob_yaml_object(layout.paths_dir, _path_key)

    if spec.get("openapi"):
        _bundle_components(spec, layout)
    elif layout.definitions_dir.is_dir():
        LOGGER.debug("[spec] Adding definitions to spec")
        if spec.get("definitions") is not None:
            raise ConflictError(f"All definitions should be defined inside {layout.definitions_dir}")
        spec["definitions"] = glob_yaml_object(layout.definitions_dir, base_name)

    if not options.skip_code_samples and layout.code_samples_dir.is_dir():
        LOGGER.debug("[spec] Adding code samples to spec")
        bundle_code_samples(spec, layout.code_samples_dir)

    if not options.skip_headers_inlining and spec.get("headers"):
        LOGGER.debug("[spec] Inlining headers references")
        inline_headers(spec)

    if not options.skip_plugins:
        run_plugins(spec, options)

    if not options.skip_children and layout.children:
        spec["children"] = bundle_children(
            layout,
            skip_code_samples=options.skip_code_samples,
            skip_headers_inlining=options.skip_headers_inlining,
        )

    return spec


def _bundle_components(spec: dict, layout: SpecLayout) -> None:
    if not layout.components_dir.is_dir():
        return
    if spec.get("components") is not None:
        raise ConflictError(f"All components should be defined inside {layout.components_dir}")

    components = {}
    for component_type in OPENAPI3_COMPONENTS:
        comp_dir = layout.components_dir / component_type
        if not comp_dir.is_dir():
            continue
        LOGGER.debug("[spec] Adding components/%s to spec", component_type)
        components[component_type] = glob_yaml_object(comp_dir, base_name)
    spec["components"] = components


def bundle_children(
    layout: SpecLayout,
    skip_code_samples: bool = False,
    skip_headers_inlining: bool = False,
) -> dict[str, dict]:
    """Bundle every child root of `layout`, keyed by lowercased relative name.

    Children are read-only here: plugins never run on them. A sync passes
    both skip flags so that the children it splits back get no code
    samples attached and keep their `headers` references.
    """
    children = {}
    for child in layout.children or []:
        name = layout.relative_child_name(child).lower()
        LOGGER.debug("[spec] Adding child %s to spec", name)
        children[name] = bundle(BundleOptions(
            basedir=child + "/",
            skip_code_samples=skip_code_samples,
            skip_headers_inlining=skip_headers_inlining,
            skip_plugins=True,
        ))
    return children


def bundle_for_serving(options: BundleOptions | None = None, fmt: str = "json") -> str:
    """Bundled document as served on /openapi.json and /openapi.yaml."""
    options = options or BundleOptions()
    options = options.model_copy(update={"skip_children": True, "action": "get"})
    spec = bundle(options)
    spec.pop("children", None)
    return stringify(spec, fmt)


def editor_source(basedir: str | None = None) -> str:
    """Text shown in the editor for the root at `basedir`.

    When bundling adds nothing to the main file its raw text is returned
    untouched, comments and formatting included.
    """
    layout = resolve_layout(basedir)
    spec = bundle(BundleOptions(
        basedir=layout.basedir,
        skip_code_samples=True,
        skip_headers_inlining=True,
        skip_children=True,
    ))
    raw = layout.main_file.read_text(encoding="utf-8")
    if spec == parse(raw):
        return raw
    return EDITOR_BANNER + stringify(spec, "yaml")
