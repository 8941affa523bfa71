from __future__ import annotations

import logging

import click

from .report import run_describe, run_summary


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages.")
def cli(verbose: bool) -> None:
    """trial_summary command line interface."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )


@cli.command("plot")
@click.option("--config", "config_path", default="config/summary.yml", show_default=True)
def plot_cmd(config_path: str) -> None:
    """Draw summary charts, statistics and an HTML report."""

    result = run_summary(config_path)
    click.echo("Summary complete:")
    click.echo(f"  Report: {result['report']}")
    click.echo(f"  Statistics: {result['stats_json']}")
    click.echo(f"  Manifest: {result['manifest']}")
    click.echo(f"  Figures: {len(result['figures'])}")


@cli.command("describe")
@click.option("--config", "config_path", default="config/summary.yml", show_default=True)
def describe_cmd(config_path: str) -> None:
    """Write descriptive statistics of the selected variables."""

    result = run_describe(config_path)
    click.echo("Statistics written:")
    click.echo(f"  {result['stats_json']}")


if __name__ == "__main__":
    cli()
