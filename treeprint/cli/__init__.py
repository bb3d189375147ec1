"""
treeprint CLI.

Command-line interface for fingerprinting directory trees and verifying
them against their manifests.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from treeprint import __version__
from treeprint.config import FingerprintConfig, load_config
from treeprint.errors import TreeprintError

logger = logging.getLogger("treeprint")


def setup_logging(verbose: bool = False) -> None:
    """Route library log records to stderr through rich."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _load_config(config_path: str | None) -> FingerprintConfig:
    if config_path is None:
        return FingerprintConfig()
    try:
        return load_config(config_path)
    except TreeprintError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


def _prepare(
    command: str,
    source_dir: str | None,
    dest_dir: str | None,
    verbose: bool,
    config_path: str | None,
) -> FingerprintConfig:
    setup_logging(verbose)
    if not source_dir:
        raise click.UsageError(f"Specify dir to {command} with `--source-dir`")
    if dest_dir:
        logger.warning("`--dest-dir` is ignored when running %s", command)
    return _load_config(config_path)


source_dir_option = click.option(
    "--source-dir", "-s", "source_dir", help="Directory to operate on"
)
dest_dir_option = click.option(
    "--dest-dir", "-d", "dest_dir", help="Unused; accepted for compatibility"
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
config_option = click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to YAML config file",
)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """treeprint: detect silent corruption in directory trees."""
    pass


@main.command()
@source_dir_option
@dest_dir_option
@verbose_option
@config_option
@click.option("--dry-run", "-n", is_flag=True, help="Hash files without writing the manifest")
def fingerprint(
    source_dir: str | None,
    dest_dir: str | None,
    verbose: bool,
    config_path: str | None,
    dry_run: bool,
) -> None:
    """Build the fingerprints file for a directory."""
    from treeprint.engine.reindex import Reindexer

    config = _prepare("fingerprint", source_dir, dest_dir, verbose, config_path)
    reindexer = Reindexer(config, on_record=lambda record: click.echo(".", nl=False))

    try:
        manifest = reindexer.build(source_dir, dry_run=dry_run)
    except (TreeprintError, OSError) as e:
        click.echo()
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo()
    if dry_run:
        click.echo("\nDry run - fingerprints file not written")
        for record in manifest.records:
            click.echo(f"{record.hash} {record.relative_path}")
    click.echo(f"\nFiles fingerprinted: {len(manifest)}")
    click.echo(f"Manifest digest: {manifest.digest()}")


@main.command()
@source_dir_option
@dest_dir_option
@verbose_option
@config_option
@click.option(
    "--report", "-o", "report_path", type=click.Path(dir_okay=False),
    help="Write a JSON report of the results",
)
def verify(
    source_dir: str | None,
    dest_dir: str | None,
    verbose: bool,
    config_path: str | None,
    report_path: str | None,
) -> None:
    """Verify a directory against its fingerprints file."""
    from treeprint.core.json_canonical import canonical_json_bytes
    from treeprint.engine.verify import CheckStatus, Verifier

    config = _prepare("verify", source_dir, dest_dir, verbose, config_path)
    verifier = Verifier(
        config,
        on_check=lambda path, status: click.echo(
            "." if status == CheckStatus.MATCH else "F", nl=False
        ),
    )

    try:
        result = verifier.check(source_dir)
    except (TreeprintError, OSError) as e:
        click.echo()
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo("\n")

    if report_path:
        try:
            Path(report_path).write_bytes(
                canonical_json_bytes(result.model_dump(mode="json"), indent=True)
            )
        except OSError as e:
            click.echo(f"Error: Cannot write report `{report_path}`: {e}", err=True)
            raise SystemExit(1)

    if result.ok:
        click.echo("All files are OK")
        return

    console = Console()
    table = Table(title="CORRUPTED FILES FOUND")
    table.add_column("Path")
    table.add_column("Status")
    table.add_column("New hash")
    for mismatch in result.mismatches:
        table.add_row(
            mismatch.relative_path,
            mismatch.status.value,
            mismatch.new_hash or f"({mismatch.error or mismatch.status.value})",
        )
    console.print(table)
    raise SystemExit(1)


@main.command("diff")
@click.argument("dir_a", type=click.Path(exists=True, file_okay=False))
@click.argument("dir_b", type=click.Path(exists=True, file_okay=False))
@config_option
def diff_manifests(dir_a: str, dir_b: str, config_path: str | None) -> None:
    """Compare the fingerprints files of two directories."""
    from treeprint.core.manifest.codec import read_manifest
    from treeprint.core.manifest.digest import compare_manifests, compute_manifest_digest

    setup_logging()
    config = _load_config(config_path)

    manifests = []
    for directory in (dir_a, dir_b):
        manifest_path = Path(directory) / config.manifest_filename
        if not manifest_path.is_file():
            click.echo(f"Error: Fingerprints file not found: {manifest_path}", err=True)
            raise SystemExit(1)
        try:
            manifests.append(read_manifest(manifest_path))
        except (TreeprintError, OSError) as e:
            click.echo(f"Error loading {manifest_path}: {e}", err=True)
            raise SystemExit(1)

    manifest_a, manifest_b = manifests
    click.echo(f"A: {dir_a} ({len(manifest_a)} files, digest {compute_manifest_digest(manifest_a)})")
    click.echo(f"B: {dir_b} ({len(manifest_b)} files, digest {compute_manifest_digest(manifest_b)})")

    diff = compare_manifests(manifest_a, manifest_b)
    if diff.identical:
        click.echo("\nManifests match")
        return

    for label, paths in (("+ Added", diff.added), ("- Removed", diff.removed), ("~ Changed", diff.changed)):
        if paths:
            click.echo(f"\n{label} ({len(paths)}):")
            for path in paths:
                click.echo(f"  {path}")
    raise SystemExit(1)
