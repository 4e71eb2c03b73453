"""
TraitCore CLI - Check and describe behavior composition manifests.

Commands:
    traitcore check     Compose a manifest and report success or the failure
    traitcore describe  Show the public surface of a composed manifest
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError

from traitcore import __version__
from traitcore.behavior.summary import CompositionSummary, summarize
from traitcore.config import get_config
from traitcore.errors import TraitCoreError
from traitcore.logger import configure_logging
from traitcore.manifest.builder import build_from_manifest
from traitcore.manifest.loader import ManifestLoader


def _load_and_compose(manifest_path: str) -> CompositionSummary:
    """Load *manifest_path* and compose it, returning a summary either way."""
    path = get_config().get_manifest_path(manifest_path)
    manifest = ManifestLoader().load(path)
    try:
        composed = build_from_manifest(manifest)
    except TraitCoreError as exc:
        return CompositionSummary(
            name=manifest.name,
            passed=False,
            participants=[spec.ref for spec in manifest.participants],
            error=exc.to_dict(),
        )
    return summarize(composed)


def _load_or_exit(manifest_path: str) -> CompositionSummary:
    try:
        return _load_and_compose(manifest_path)
    except (FileNotFoundError, TypeError, yaml.YAMLError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    except ValidationError as exc:
        click.echo(f"Error: invalid manifest {manifest_path}:\n{exc}", err=True)
        sys.exit(2)


@click.group()
@click.version_option(__version__)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Override TRAITCORE_LOG_LEVEL",
)
def main(log_level: Optional[str]):
    """TraitCore - Encapsulated behaviors and conflict-aware composition."""
    configure_logging(level=log_level)


@main.command("check")
@click.argument("manifest")
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
def check_cmd(manifest: str, output_format: str):
    """Compose MANIFEST and report whether it succeeds.

    Exits 0 when the composition succeeds, 1 when composing fails, and 2
    when the manifest itself cannot be loaded.

    Example:
        traitcore check singer.traits.yaml --format json
    """
    summary = _load_or_exit(manifest)

    if output_format == "json":
        click.echo(json.dumps(summary.model_dump(), indent=2))
    elif summary.passed:
        click.echo(
            f"OK  {summary.name}: {len(summary.methods)} methods from "
            f"{len(summary.participants)} behaviors"
        )
        if summary.dependencies:
            click.echo(f"    unsatisfied dependencies: {', '.join(summary.dependencies)}")
    else:
        error = summary.error or {}
        click.echo(f"FAIL {summary.name}: {error.get('error')}: {error.get('message')}")

    if not summary.passed:
        sys.exit(1)


@main.command("describe")
@click.argument("manifest")
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
def describe_cmd(manifest: str, output_format: str):
    """Describe the composed behavior declared in MANIFEST.

    Lists public methods, unsatisfied dependencies, the chain root and the
    methods whose conflicts were resolved (with the policy used).
    """
    summary = _load_or_exit(manifest)
    if not summary.passed:
        error = summary.error or {}
        click.echo(f"Error: {error.get('message')}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(summary.model_dump(exclude={"passed", "error"}), indent=2))
        return

    click.echo(f"Behavior:     {summary.name}")
    click.echo(f"Participants: {', '.join(summary.participants)}")
    click.echo(f"Chain root:   {summary.chain_root or '(none)'}")
    click.echo("Methods:")
    for name in summary.methods:
        policy = summary.resolved.get(name)
        suffix = f"  [resolved: {policy}]" if policy else ""
        click.echo(f"  {name}{suffix}")
    if summary.dependencies:
        click.echo("Unsatisfied dependencies:")
        for name in summary.dependencies:
            click.echo(f"  {name}")
