"""Resolve the directory layout of a spec root and discover child roots."""

import os
from pathlib import Path

from spec_repo.layout.base import (
    DEFAULT_BASEDIR,
    MAIN_FILE_NAME,
    RESERVED_DIRS,
    SpecLayout,
)


def normalize_basedir(basedir: str | None) -> str:
    """Default to `spec/` and make sure the separator is trailing."""
    basedir = basedir or DEFAULT_BASEDIR
    if not basedir.endswith("/"):
        basedir += "/"
    return basedir


def resolve_layout(basedir: str | None = None) -> SpecLayout:
    """Compute the canonical sub-paths of a spec root.

    No existence checks are made on the sub-paths; only child discovery
    looks at the filesystem.
    """
    basedir = normalize_basedir(basedir)
    return SpecLayout(
        basedir=basedir,
        main_file=Path(basedir + MAIN_FILE_NAME),
        paths_dir=Path(basedir + "paths/"),
        definitions_dir=Path(basedir + "definitions/"),
        code_samples_dir=Path(basedir + "code_samples/"),
        components_dir=Path(basedir + "components/"),
        children=find_children(basedir),
    )


def find_children(basedir: str) -> list[str] | None:
    """List immediate subdirectories of basedir that are themselves spec roots.

    Returns None when basedir does not exist, which is distinct from an
    empty list (exists, no children).
    """
    if not os.path.isdir(basedir):
        return None

    children = []
    for name in sorted(os.listdir(basedir)):
        source = os.path.join(basedir, name)
        if not os.path.isdir(source):
            continue
        if name.endswith(RESERVED_DIRS):
            continue
        children.append(source)
    return children
