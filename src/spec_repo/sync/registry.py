"""Route registry: which spec root is served under which mount path.

The registry is owned by the serving process and passed explicitly to
whoever needs to mount new roots. The top-level root is mounted at `/`;
a child root at `spec/v2/beta/` is mounted at `/v2/beta`, inside the
`/v2` namespace.
"""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from spec_repo.errors import RegistryError
from spec_repo.layout.base import SpecLayout
from spec_repo.layout.resolver import normalize_basedir, resolve_layout

LOGGER = logging.getLogger(__name__)

ROOT_MOUNT = "/"


class Mount(BaseModel):
    """One served spec root."""

    mount_path: str
    basedir: str
    parent: str | None = None
    server: Any = None


# Called with the new mount and its parent mount (None for the top-level root);
# returns the serving layer's handle for the mount.
ServerFactory = Callable[[Mount, Mount | None], Any]


class RouteRegistry:
    """Mount path -> Mount table for one top-level spec root."""

    def __init__(self, root_basedir: str | None = None, factory: ServerFactory | None = None):
        self.root_basedir = normalize_basedir(root_basedir)
        self.factory = factory
        self.mounts: dict[str, Mount] = {}

    def mount_path_for(self, basedir: str) -> str:
        """`/` for the top-level root, `/<relative path>` for nested roots."""
        basedir = normalize_basedir(basedir)
        if not basedir.startswith(self.root_basedir):
            raise RegistryError(f"{basedir} is outside of {self.root_basedir}")
        relative = basedir[len(self.root_basedir):].strip("/")
        return "/" + relative

    def register_root(self) -> Mount:
        return self._add(Mount(mount_path=ROOT_MOUNT, basedir=self.root_basedir))

    def mount_child(self, basedir: str) -> Mount:
        """Mount a child root under the namespace of its parent root.

        The parent must already be registered.
        """
        mount_path = self.mount_path_for(basedir)
        if mount_path == ROOT_MOUNT:
            raise RegistryError(f"{basedir} is the top-level root, not a child")
        parent = mount_path.rsplit("/", 1)[0] or ROOT_MOUNT
        if parent not in self.mounts:
            raise RegistryError(f"No parent namespace {parent} registered for {mount_path}")
        return self._add(Mount(
            mount_path=mount_path,
            basedir=normalize_basedir(basedir),
            parent=parent,
        ))

    def mount_tree(self, layout: SpecLayout | None = None) -> None:
        """Register the top-level root and every child root below it."""
        layout = layout or resolve_layout(self.root_basedir)
        if layout.basedir == self.root_basedir:
            self.register_root()
        for child in layout.children or []:
            self.mount_child(child)
            self.mount_tree(resolve_layout(child))

    def get(self, mount_path: str) -> Mount | None:
        return self.mounts.get(mount_path)

    def _add(self, mount: Mount) -> Mount:
        if self.factory is not None:
            parent = self.mounts.get(mount.parent) if mount.parent else None
            mount.server = self.factory(mount, parent)
        LOGGER.info("Mounted %s at %s", mount.basedir, mount.mount_path)
        self.mounts[mount.mount_path] = mount
        return mount
