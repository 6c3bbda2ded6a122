"""Data models describing where the pieces of a spec root live on disk.

A spec root is a directory holding one logical API document. Everything
else (fragments, code samples, nested child roots) is derived from its
base directory by plain string concatenation.
"""

from pathlib import Path

from pydantic import BaseModel

DEFAULT_BASEDIR = "spec/"

MAIN_FILE_NAME = "openapi.yaml"

OPENAPI3_COMPONENTS = (
    "schemas",
    "responses",
    "parameters",
    "examples",
    "headers",
    "requestBodies",
    "links",
    "callbacks",
    "securitySchemes",
)

# Directory names that hold fragments or plugins and never act as child roots.
RESERVED_DIRS = ("paths", "components", "definitions", "code_samples", "plugins")


class SpecLayout(BaseModel):
    """Canonical sub-paths of one spec root."""

    basedir: str
    main_file: Path
    paths_dir: Path
    definitions_dir: Path
    code_samples_dir: Path
    components_dir: Path
    children: list[str] | None = None  # None: basedir does not exist yet

    def has_fragments(self) -> bool:
        """True when at least one fragment directory exists."""
        return any(
            d.is_dir() for d in (self.paths_dir, self.definitions_dir, self.components_dir)
        )

    def relative_child_name(self, child: str) -> str:
        """Name of a child root relative to this root, e.g. `spec/v2` -> `v2`."""
        if not child.startswith(self.basedir):
            raise ValueError(f"{child} is not inside {self.basedir}")
        return child[len(self.basedir):].strip("/")
