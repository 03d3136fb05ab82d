"""CLI application entry point for pancakepath.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer

from pancakepath import __version__
from pancakepath.cli.output import (
    SYM_OK,
    console,
    create_progress,
    print_cancellation_summary,
    print_error,
    print_header,
    print_layer_info,
    print_layout,
    print_snap,
    print_step,
    print_success,
)
from pancakepath.config import (
    PANCAKE_SHADES,
    ExportConfig,
    LoggingConfig,
    PaletteConfig,
    PancakeSettings,
    ThinFeatureConfig,
    get_default_settings,
)
from pancakepath.core import LayerProcessor, PaletteMatcher, compute_layout
from pancakepath.domain import GroupRecord, Layer, Size
from pancakepath.exceptions import (
    PancakePathError,
    ProcessingCancelledError,
    SVGLoadError,
    SVGSaveError,
)
from pancakepath.io import SVGWriter, read_svg, save_raster_image

# Create the Typer app
app = typer.Typer(
    name="pancakepath",
    help="Prepare vector drawings for pancake printing.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]PancakePath[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Prepare vector drawings for pancake printing."""


def _load_layer(input_svg: Path) -> Layer:
    if not input_svg.exists():
        print_error(
            f"Input file not found: {input_svg}",
            details=f"The file '{input_svg}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_svg.is_file():
        print_error(
            f"Input path is not a file: {input_svg}",
            details="Please provide a path to an SVG file.",
        )
        raise typer.Exit(code=1)

    return read_svg(input_svg)


@app.command()
def process(
    input_svg: Annotated[
        Path,
        typer.Argument(
            help="Path to input SVG drawing",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-processed.svg)",
        ),
    ] = None,
    thin: Annotated[
        float,
        typer.Option(
            "--thin",
            help="Remove features thinner than twice this amount (0 = off)",
            min=0.0,
        ),
    ] = 0.0,
    clone_thin: Annotated[
        bool,
        typer.Option(
            "--clone-thin",
            help="Keep originals and add the thin-feature cleaned copies on top",
        ),
    ] = False,
    no_resolve: Annotated[
        bool,
        typer.Option(
            "--no-resolve",
            help="Skip overlap resolution",
        ),
    ] = False,
    outline: Annotated[
        bool,
        typer.Option(
            "--outline",
            help="Outline every fill with the next darker shade",
        ),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            help="Only use the first N palette shades",
            min=1,
        ),
    ] = None,
    min_length: Annotated[
        float,
        typer.Option(
            "--min-length",
            help="Drop paths with a shorter outline (0 = keep all)",
            min=0.0,
        ),
    ] = 0.0,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Resolve overlaps, remove thin features and snap colors of a drawing.

    Example:
        pancakepath process smiley.svg --thin 1.5 --outline

    This will create smiley-processed.svg with non-overlapping paths colored
    in batter shades.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    try:
        settings = PancakeSettings(
            thin_features=ThinFeatureConfig(amount=thin, clone=clone_thin),
            palette=PaletteConfig(limit=limit, outline=outline),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "ERROR",
            ),
        )
    except ValueError as e:
        print_error("Invalid options", details=str(e))
        raise typer.Exit(code=1)

    output_path = output or SVGWriter.get_processed_path(input_svg)

    try:
        if not quiet:
            print_step("Loading drawing")
        layer = _load_layer(input_svg)

        if not quiet:
            records = sum(1 for _ in layer.iter_records())
            groups = sum(1 for item in layer if isinstance(item, GroupRecord))
            print_layer_info(str(input_svg), len(layer), records, groups)
            print_step("Processing")

        processor = LayerProcessor(settings)
        if not quiet:
            with create_progress() as progress:
                task_id = progress.add_task("stages", total=None)

                def update_progress(stage: str, completed: int, total: int) -> None:
                    progress.update(task_id, description=stage, completed=completed, total=total)
                    if verbose:
                        console.print(f"  {SYM_OK} {stage}")

                stats = processor.process(
                    layer,
                    resolve=not no_resolve,
                    min_length=min_length,
                    progress_callback=update_progress,
                )
        else:
            stats = processor.process(layer, resolve=not no_resolve, min_length=min_length)

        SVGWriter(layer, output_path).save()

        if not quiet:
            print_success(
                output_path=str(output_path),
                file_size=_format_file_size(output_path),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                removed=stats.removed_count + stats.thin_removed_count,
                outlines=stats.outlines_added,
                errors=stats.error_count,
            )

    except (KeyboardInterrupt, ProcessingCancelledError) as e:
        if not quiet:
            processed = getattr(e, "processed_count", 0)
            pending = getattr(e, "pending_count", 0)
            print_cancellation_summary(processed, pending)
        raise typer.Exit(code=130) from None
    except SVGLoadError as e:
        print_error(f"Could not load drawing: {e.reason}")
        raise typer.Exit(code=1)
    except SVGSaveError as e:
        print_error(f"Could not save drawing: {e.reason}")
        raise typer.Exit(code=1)
    except PancakePathError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise


@app.command()
def layout(
    trace: Annotated[
        tuple[float, float],
        typer.Option("--trace", help="Width and height of the traced shape"),
    ],
    count: Annotated[
        int | None,
        typer.Argument(help="Number of copies (1, 2, 4 or 8; default from settings)", show_default=False),
    ] = None,
    area: Annotated[
        tuple[float, float] | None,
        typer.Option("--area", help="Width and height of the printable area (default: griddle size)"),
    ] = None,
) -> None:
    """Compute positions and scale for duplicated copies of a traced shape.

    Example:
        pancakepath layout 4 --trace 100 60
    """
    config = get_default_settings().layout
    copies = count if count is not None else config.copies
    width, height = area if area is not None else (config.griddle_width, config.griddle_height)

    try:
        result = compute_layout(copies, Size(*trace), Size(width, height))
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    print_layout(result, copies)


@app.command()
def snap(
    color: Annotated[
        str,
        typer.Argument(help="Color to snap, as rgb(r, g, b) or hex", show_default=False),
    ],
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Only use the first N palette shades", min=1),
    ] = None,
) -> None:
    """Show the batter shade a color snaps to.

    Example:
        pancakepath snap "#c8a020"
    """
    matcher = PaletteMatcher(PANCAKE_SHADES)
    index = matcher.nearest_index(color, limit)
    print_snap(color, index, matcher[index])


@app.command()
def rasterize(
    input_svg: Annotated[
        Path,
        typer.Argument(help="Path to input SVG drawing", show_default=False),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output PNG path (default: {name}.png)"),
    ] = None,
    dpi: Annotated[
        int | None,
        typer.Option("--dpi", help="Resolution (72 = one pixel per unit)", min=1, max=1200),
    ] = None,
) -> None:
    """Render a drawing to a PNG image.

    Example:
        pancakepath rasterize smiley-processed.svg --dpi 150
    """
    export = ExportConfig(dpi=dpi) if dpi is not None else get_default_settings().export
    output_path = output or input_svg.with_suffix(".png")
    try:
        layer = _load_layer(input_svg)
        saved = save_raster_image(layer, export.dpi, output_path).result()
    except SVGLoadError as e:
        print_error(f"Could not load drawing: {e.reason}")
        raise typer.Exit(code=1)
    except OSError as e:
        print_error(f"Could not save image: {e}")
        raise typer.Exit(code=1)
    except PancakePathError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    console.print(f"[bold green]{SYM_OK}[/bold green] {saved} ({_format_file_size(saved)})")


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
