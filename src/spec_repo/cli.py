"""CLI entry point for spec-repo."""

import logging
from pathlib import Path

import click

from spec_repo.bundle.bundler import bundle_for_serving, editor_source
from spec_repo.bundle.options import BundleOptions
from spec_repo.config import load_config
from spec_repo.errors import SpecRepoError
from spec_repo.sync.orchestrator import sync as sync_spec
from spec_repo.sync.registry import RouteRegistry


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _basedir(basedir: str | None) -> str:
    return basedir or load_config().basedir


@click.group()
def main():
    """spec-repo: keep a split OpenAPI spec and its bundled form in sync."""
    pass


@main.command()
@click.option("--basedir", default=None, help="Spec root directory (default: spec/).")
@click.option("--format", "fmt", default="yaml", type=click.Choice(["yaml", "json"]), help="Output format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write to a file instead of stdout.")
@click.option("--skip-plugins", is_flag=True, help="Do not run plugins.")
@click.option("--skip-code-samples", is_flag=True, help="Do not attach code samples.")
@click.option("--skip-headers-inlining", is_flag=True, help="Keep header references as they are.")
@click.option("-v", "--verbose", is_flag=True, help="Log every bundle step.")
def bundle(basedir: str | None, fmt: str, output: Path | None, skip_plugins: bool,
           skip_code_samples: bool, skip_headers_inlining: bool, verbose: bool):
    """Bundle the spec root into a single document."""
    _setup_logging(verbose)
    config = load_config()
    options = BundleOptions(
        basedir=basedir or config.basedir,
        skip_plugins=skip_plugins,
        skip_code_samples=skip_code_samples,
        skip_headers_inlining=skip_headers_inlining,
        plugins_dir=config.plugins_dir,
    )
    try:
        text = bundle_for_serving(options, fmt)
    except SpecRepoError as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Bundled spec saved to {output}", err=True)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("--basedir", default=None, help="Spec root directory (default: spec/).")
@click.option("--skip-plugins", is_flag=True, help="Do not run plugins nor split children.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def sync(doc_path: Path, basedir: str | None, skip_plugins: bool, verbose: bool):
    """Write DOC_PATH back into the spec root, splitting it into fragments."""
    _setup_logging(verbose)
    config = load_config()
    options = BundleOptions(
        basedir=basedir or config.basedir,
        skip_plugins=skip_plugins,
        plugins_dir=config.plugins_dir,
    )
    text = doc_path.read_text(encoding="utf-8")
    try:
        sync_spec(text, options)
    except SpecRepoError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Synchronized {doc_path} into {options.basedir}")


@main.command()
@click.option("--basedir", default=None, help="Spec root directory (default: spec/).")
def editor(basedir: str | None):
    """Print the document as the editor shows it."""
    _setup_logging(False)
    try:
        click.echo(editor_source(_basedir(basedir)), nl=False)
    except SpecRepoError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.option("--basedir", default=None, help="Spec root directory (default: spec/).")
def routes(basedir: str | None):
    """List the mount path of every spec root in the tree."""
    registry = RouteRegistry(_basedir(basedir))
    try:
        registry.mount_tree()
    except SpecRepoError as e:
        raise click.ClickException(str(e)) from e
    for mount_path, mount in sorted(registry.mounts.items()):
        click.echo(f"{mount_path}\t{mount.basedir}")
