"""Options controlling a bundle run."""

from typing import Literal

from pydantic import BaseModel

from spec_repo.layout.base import DEFAULT_BASEDIR


class BundleOptions(BaseModel):
    """Flags for each skippable bundle step, plus the request context.

    `action` tells plugins whether the document is being read ("get") or
    written back by a sync ("put"). `plugins_dir` replaces the default
    plugins directory, unless the environment variable is set.
    """

    basedir: str = DEFAULT_BASEDIR
    skip_code_samples: bool = False
    skip_headers_inlining: bool = False
    skip_plugins: bool = False
    skip_children: bool = False
    action: Literal["get", "put"] = "get"
    plugins_dir: str | None = None
