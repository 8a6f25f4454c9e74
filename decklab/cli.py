"""
DeckLab CLI
===========

Click-based command-line interface for DeckLab. Provides subcommands to
inspect a cipher mapping, encipher plaintext with a full deck trace, and
search ciphertext for isomorphs.

Usage::

    python -m decklab mapping --seed 42 --swap-count 4
    python -m decklab encipher "attack at dawn" --seed 7 --trace --analyze
    python -m decklab isomorphs "QWERTQWERTZXCVB" --top 10
    python -m decklab -o json -q isomorphs "ABCABDABE"

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import click
from pydantic import ValidationError

from shared.config import DeckLabConfig
from shared.console import DeckLabConsole
from shared.logger import DeckLabLogger
from shared.models import AnalysisResult

from decklab import __version__
from decklab.analyzers.generator import InfeasibleConfigError, MappingExhaustedError
from decklab.core.engine import DeckLabEngine
from decklab.core.models import CipherConfig, CipherMapping, IsomorphReport
from decklab.output.console import DeckConsoleOutput
from decklab.output.report import DeckLabReportGenerator


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a DeckLab configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json", "html"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file path (for JSON/HTML output).",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner, log and informational output.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: str,
    output_file: Optional[str],
    quiet: bool,
) -> None:
    """DeckLab -- card-deck permutation cipher and isomorph workbench."""
    ctx.ensure_object(dict)

    try:
        decklab_config = DeckLabConfig.load(config) if config else DeckLabConfig()
    except ValueError as exc:
        raise click.UsageError(f"invalid configuration: {exc}", ctx=ctx) from exc
    settings = decklab_config.global_settings
    ctx.obj["config"] = decklab_config
    ctx.obj["output_format"] = output
    ctx.obj["output_file"] = output_file
    ctx.obj["quiet"] = quiet

    console = DeckLabConsole(quiet=quiet)
    logger = DeckLabLogger(
        "engine",
        log_level="DEBUG" if settings.debug else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
        console_output=not quiet,
    )
    ctx.obj["console"] = console
    try:
        ctx.obj["engine"] = DeckLabEngine(decklab_config, logger=logger)
    except (ValueError, ValidationError) as exc:
        raise click.UsageError(f"invalid configuration: {exc}", ctx=ctx) from exc
    ctx.obj["display"] = DeckConsoleOutput(console)
    ctx.obj["reporter"] = DeckLabReportGenerator(top=decklab_config.analysis.top)

    if not quiet and output == "console":
        console.banner(version=__version__)


# ===================================================================== #
#  Shared helpers
# ===================================================================== #

def _generator_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the mapping-generator options shared by several commands."""
    options = [
        click.option("--seed", "-s", type=int, default=None,
                     help="Generator seed (default from config)."),
        click.option("--swap-count", type=click.IntRange(1, 13), default=None,
                     help="Swaps per transformation, 1-13."),
        click.option("--rotation-max", type=click.IntRange(0, 25), default=None,
                     help="Maximum rotation, 0-25; 0 disables rotation."),
        click.option("--rotation-constant/--rotation-random", default=None,
                     help="Always rotate by --rotation-max, or draw from [1, max]."),
        click.option("--sliding-window/--seeded", default=None,
                     help="Use the deterministic sliding-window mapping."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_mapping(
    ctx: click.Context,
    seed: Optional[int],
    swap_count: Optional[int],
    rotation_max: Optional[int],
    rotation_constant: Optional[bool],
    sliding_window: Optional[bool],
) -> CipherMapping:
    """Merge command-line options over config defaults and build a mapping."""
    engine: DeckLabEngine = ctx.obj["engine"]
    settings = ctx.obj["config"].generator
    try:
        cipher_config = CipherConfig(
            swap_count=settings.swap_count if swap_count is None else swap_count,
            rotation_max=settings.rotation_max if rotation_max is None else rotation_max,
            rotation_constant=(
                settings.rotation_constant if rotation_constant is None else rotation_constant
            ),
        )
        return engine.build_mapping(seed, cipher_config, sliding_window)
    except (InfeasibleConfigError, MappingExhaustedError, ValidationError) as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc


def _emit_json(ctx: click.Context, data: dict[str, Any]) -> None:
    """Write *data* as JSON to the output file, or to stdout."""
    text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    output_file = ctx.obj["output_file"]
    if output_file:
        path = Path(output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        ctx.obj["console"].success(f"JSON report saved to: {path}")
    else:
        click.echo(text)


def _handle_analysis_output(ctx: click.Context, result: AnalysisResult) -> None:
    """Emit an isomorph analysis in the selected non-console format."""
    reporter: DeckLabReportGenerator = ctx.obj["reporter"]
    if ctx.obj["output_format"] == "json":
        _emit_json(ctx, json.loads(reporter.to_json(result)))
        return
    output_file = ctx.obj["output_file"]
    if output_file:
        path = Path(output_file)
    else:
        path = Path(ctx.obj["config"].global_settings.output_dir) / "decklab_report.html"
    path = reporter.generate_html(result, path)
    ctx.obj["console"].success(f"HTML report saved to: {path}")


def _display_analysis(ctx: click.Context, result: AnalysisResult) -> None:
    analysis = ctx.obj["config"].analysis
    display: DeckConsoleOutput = ctx.obj["display"]
    report = IsomorphReport.model_validate(result.metadata)
    display.display_isomorphs(
        report,
        top=ctx.obj.get("top") or analysis.top,
        min_interestingness=analysis.min_interestingness,
    )
    display.display_profile(report.profile)
    ctx.obj["console"].findings_table(result.findings)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@_generator_options
@click.pass_context
def mapping(
    ctx: click.Context,
    seed: Optional[int],
    swap_count: Optional[int],
    rotation_max: Optional[int],
    rotation_constant: Optional[bool],
    sliding_window: Optional[bool],
) -> None:
    """Show the transformation assigned to every letter."""
    cipher_mapping = _build_mapping(
        ctx, seed, swap_count, rotation_max, rotation_constant, sliding_window
    )
    output_format = ctx.obj["output_format"]
    if output_format == "console":
        ctx.obj["display"].display_mapping(cipher_mapping)
    elif output_format == "json":
        _emit_json(ctx, cipher_mapping.model_dump(mode="json"))
    else:
        raise click.UsageError("HTML output is only available for isomorph analysis", ctx=ctx)


@cli.command("encipher")
@click.argument("plaintext")
@_generator_options
@click.option("--trace", is_flag=True, default=False,
              help="Show the deck after every enciphered letter.")
@click.option("--analyze", is_flag=True, default=False,
              help="Run isomorph analysis on the resulting ciphertext.")
@click.pass_context
def encipher_cmd(
    ctx: click.Context,
    plaintext: str,
    seed: Optional[int],
    swap_count: Optional[int],
    rotation_max: Optional[int],
    rotation_constant: Optional[bool],
    sliding_window: Optional[bool],
    trace: bool,
    analyze: bool,
) -> None:
    """Encipher PLAINTEXT; characters outside A-Z are skipped."""
    engine: DeckLabEngine = ctx.obj["engine"]
    output_format = ctx.obj["output_format"]
    if output_format == "html" and not analyze:
        raise click.UsageError("HTML output requires --analyze", ctx=ctx)

    cipher_mapping = _build_mapping(
        ctx, seed, swap_count, rotation_max, rotation_constant, sliding_window
    )
    result = engine.encipher(plaintext, cipher_mapping)
    analysis = engine.analyze_isomorphs(result.ciphertext) if analyze else None

    if output_format == "console":
        ctx.obj["display"].display_encipherment(result, trace=trace)
        if analysis is not None:
            _display_analysis(ctx, analysis)
    elif output_format == "json":
        data: dict[str, Any] = {
            "plaintext": plaintext,
            "ciphertext": result.ciphertext,
            "encipherment": result.model_dump(mode="json", exclude={"steps"} if not trace else None),
        }
        if analysis is not None:
            data["analysis"] = analysis.model_dump(mode="json")
        _emit_json(ctx, data)
    else:
        _handle_analysis_output(ctx, analysis)


@cli.command()
@click.argument("ciphertext")
@click.option("--top", "-n", type=click.IntRange(min=1), default=None,
              help="Number of ranked isomorphs to display.")
@click.option("--rank-by-count/--rank-by-length", default=None,
              help="Use pattern occurrence count as the secondary ranking key.")
@click.pass_context
def isomorphs(
    ctx: click.Context,
    ciphertext: str,
    top: Optional[int],
    rank_by_count: Optional[bool],
) -> None:
    """Find and rank isomorphs in CIPHERTEXT.

    Whitespace is removed and letters are uppercased first, so ciphertext
    written in five-letter groups can be pasted as-is.
    """
    engine: DeckLabEngine = ctx.obj["engine"]
    text = "".join(ciphertext.split()).upper()
    ctx.obj["top"] = top

    result = engine.analyze_isomorphs(text, rank_by_count=rank_by_count)

    if ctx.obj["output_format"] == "console":
        _display_analysis(ctx, result)
    else:
        _handle_analysis_output(ctx, result)


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the DeckLab CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
