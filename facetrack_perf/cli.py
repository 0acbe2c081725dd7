"""
Command line interface for facetrack-perf.

Examples:
    # Benchmark a callable and print a markdown report
    facetrack-perf bench mypkg.pipeline:process_frame --iterations 100

    # Save JSON and markdown reports
    facetrack-perf bench mypkg.pipeline:process_frame \\
      --output reports/process_frame.json --format both
"""

import importlib
import json
import sys
from pathlib import Path
from typing import Any, Optional

import click

from facetrack_perf import __version__
from facetrack_perf.config import Config
from facetrack_perf.engine import MetricsEngine
from facetrack_perf.errors import BenchmarkError
from facetrack_perf.logging import initialize_logging


def load_target(target: str) -> Any:
    """Import ``module:attribute`` and return the attribute.

    Raises:
        click.BadParameter: If the target is malformed or cannot be imported
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise click.BadParameter(
            f"expected MODULE:CALLABLE, got '{target}'", param_hint="TARGET"
        )
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(
            f"cannot import module '{module_name}': {e}", param_hint="TARGET"
        ) from e
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.BadParameter(
                f"'{module_name}' has no attribute '{attr_path}'", param_hint="TARGET"
            ) from e
    return obj


@click.group()
@click.version_option(__version__, prog_name="facetrack-perf")
def main() -> None:
    """Performance tooling for the face tracking pipeline."""


@main.command()
@click.argument("target")
@click.option(
    "--iterations",
    type=click.IntRange(min=1),
    default=None,
    help="Measured iterations (default from configuration)",
)
@click.option(
    "--warmup",
    type=click.IntRange(min=0),
    default=None,
    help="Unmeasured warmup iterations (default from configuration)",
)
@click.option("--name", default=None, help="Benchmark name (defaults to TARGET)")
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for the JSON report",
)
@click.option(
    "--format",
    type=click.Choice(["json", "markdown", "both"]),
    default="markdown",
    help="Output format",
)
def bench(
    target: str,
    iterations: Optional[int],
    warmup: Optional[int],
    name: Optional[str],
    output: Optional[Path],
    format: str,
):
    """Benchmark TARGET, given as MODULE:CALLABLE."""
    cfg = Config.from_env()
    initialize_logging(cfg.logging)

    operation = load_target(target)
    name = name or target

    engine = MetricsEngine(cfg)
    engine.start()
    try:
        result = engine.run_benchmark(name, operation, iterations=iterations, warmup=warmup)
    except BenchmarkError as e:
        raise click.ClickException(str(e)) from e
    report = engine.generate_report()
    engine.stop()

    if format in ["json", "both"]:
        if output:
            report.save(output)
            click.echo(f"✓ Report saved to: {output}")
        else:
            click.echo(json.dumps(report.to_dict(), indent=2, default=str))

    if format in ["markdown", "both"]:
        markdown = report.to_markdown()
        click.echo(markdown)
        if output:
            md_path = output.with_suffix(".md")
            md_path.parent.mkdir(parents=True, exist_ok=True)
            md_path.write_text(markdown)
            click.echo(f"✓ Markdown report saved to: {md_path}")

    if result.errors:
        click.echo(
            f"\n⚠️  WARNING: {result.errors}/{result.iterations} iterations failed",
            err=True,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
