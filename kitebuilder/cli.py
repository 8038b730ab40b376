"""
CLI interface for kitebuilder.

Provides commands to list, preview, and upload pipelines.

Pipelines live in .buildkite/pipelines/<slug>/pipeline.py. The slug defaults
to $BUILDKITE_PIPELINE_SLUG, which the agent sets for every job.
"""

import os
from pathlib import Path

import click

from kitebuilder import __version__
from kitebuilder.config import find_buildkite_root
from kitebuilder.errors import KitebuilderError


def _pipelines_dir(ctx) -> Path:
    config = ctx.obj["config"]
    root = find_buildkite_root()
    if root is None:
        click.echo("✗ No .buildkite directory found", err=True)
        raise SystemExit(1)
    return root / config.pipelines_dir


def _get_available_pipelines(pipelines_dir: Path) -> list[str]:
    """Get list of pipeline slugs that have a pipeline.py."""
    if not pipelines_dir.exists():
        return []
    return sorted(p.parent.name for p in pipelines_dir.glob("*/pipeline.py"))


def _resolve_pipeline_root(ctx, pipeline: str | None) -> Path:
    slug = pipeline or os.environ.get("BUILDKITE_PIPELINE_SLUG")
    if not slug:
        raise click.UsageError("No pipeline given and BUILDKITE_PIPELINE_SLUG is not set")

    pipelines_dir = _pipelines_dir(ctx)
    root = pipelines_dir / slug
    if not (root / "pipeline.py").exists():
        click.echo(f"✗ Unknown pipeline: {slug}", err=True)
        available = _get_available_pipelines(pipelines_dir)
        if available:
            click.echo("\nAvailable pipelines:", err=True)
            for name in available:
                click.echo(f"  {name}", err=True)
        raise SystemExit(1)
    return root


@click.group()
@click.version_option(version=__version__, prog_name="kitebuilder")
@click.pass_context
def main(ctx):
    """
    kitebuilder - Build CI pipelines in Python.

    Evaluate a pipeline definition and upload it through buildkite-agent.
    """
    from kitebuilder.config import load_config
    from kitebuilder.utils import setup_logging

    ctx.ensure_object(dict)
    try:
        config = load_config()
    except KitebuilderError as e:
        click.echo(f"✗ Invalid configuration: {e}", err=True)
        raise SystemExit(1)

    ctx.obj["config"] = config
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        console_output=config.console,
    )


@main.command("run")
@click.argument("pipeline", required=False)
@click.option("--artifact", "artifacts", multiple=True, type=click.Path(exists=True, dir_okay=False),
              help="Extra file to upload as an artifact (repeatable)")
@click.pass_context
def run(ctx, pipeline: str | None, artifacts: tuple[str, ...]):
    """
    Build a pipeline and upload it.

    PIPELINE is the pipeline slug (directory under .buildkite/pipelines).

    Examples:

        kitebuilder run app

        kitebuilder run app --artifact coverage/summary.json
    """
    from kitebuilder.agent import AgentCommand
    from kitebuilder.builder import Pipeline

    config = ctx.obj["config"]
    root = _resolve_pipeline_root(ctx, pipeline)

    try:
        built = Pipeline.build(root, agent=AgentCommand(config.agent_executable))
        built.artifacts.extend(artifacts)
        built.upload()
    except KitebuilderError as e:
        click.echo(f"✗ {root.name} failed: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"✓ {root.name} uploaded")


@main.command("preview")
@click.argument("pipeline", required=False)
@click.pass_context
def preview(ctx, pipeline: str | None):
    """
    Print the pipeline YAML without uploading.

    Example:

        kitebuilder preview app
    """
    from kitebuilder.builder import Pipeline

    root = _resolve_pipeline_root(ctx, pipeline)
    try:
        click.echo(Pipeline.build(root).to_yaml(), nl=False)
    except KitebuilderError as e:
        click.echo(f"✗ {root.name} failed: {e}", err=True)
        raise SystemExit(1)


@main.command("list")
@click.pass_context
def list_pipelines(ctx):
    """List available pipelines."""
    available = _get_available_pipelines(_pipelines_dir(ctx))
    if not available:
        click.echo("No pipelines found.")
        return
    for name in available:
        click.echo(name)


if __name__ == "__main__":
    main()
