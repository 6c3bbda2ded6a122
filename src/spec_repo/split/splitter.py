"""Splitter: write an in-memory document back into a spec root's fragment files."""

import logging

from spec_repo.document import update_yaml
from spec_repo.layout.base import OPENAPI3_COMPONENTS, SpecLayout
from spec_repo.layout.codec import path_to_filename
from spec_repo.store.fragments import update_glob_object

LOGGER = logging.getLogger(__name__)


def split(spec: dict, layout: SpecLayout) -> bool:
    """Decompose `spec` into the files of `layout`.

    Returns True when the root directory had to be created, along with its
    paths and components directories. `children` is not handled here.
    """
    created = False
    if not layout.main_file.parent.is_dir():
        LOGGER.info("Creating spec root %s", layout.basedir)
        layout.paths_dir.mkdir(parents=True)
        layout.components_dir.mkdir(parents=True)
        created = True

    spec = dict(spec)

    if spec.get("paths") is not None and layout.paths_dir.is_dir():
        paths = {path_to_filename(key): value for key, value in spec["paths"].items()}
        update_glob_object(layout.paths_dir, paths)
        del spec["paths"]

    if spec.get("openapi"):
        if spec.get("components") is not None and layout.components_dir.is_dir():
            components = dict(spec["components"])
            for component_type in OPENAPI3_COMPONENTS:
                if components.get(component_type) is None:
                    continue
                comp_dir = layout.components_dir / component_type
                comp_dir.mkdir(exist_ok=True)
                update_glob_object(comp_dir, components.pop(component_type))
            if components:
                spec["components"] = components
            else:
                del spec["components"]
    elif spec.get("definitions") is not None and layout.definitions_dir.is_dir():
        update_glob_object(layout.definitions_dir, spec["definitions"])
        del spec["definitions"]

    update_yaml(layout.main_file, spec)
    return created
