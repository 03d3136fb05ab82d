"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from pancakepath.domain import LayoutResult, PaletteEntry

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for pipeline stages."""
    return Progress(
        TextColumn("  "),
        TextColumn("{task.description}"),
        BarColumn(bar_width=30, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def print_header(version: str) -> None:
    """Print application header."""
    console.print(f"\n[bold]PancakePath[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_layer_info(svg_path: str, items: int, records: int, groups: int) -> None:
    """Print information about a loaded drawing.

    Args:
        svg_path: Path to the SVG file
        items: Top level items in the layer
        records: Path records, counting group members
        groups: Top level groups
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(svg_path)
    console.print(line)
    console.print(f"  {items} items {SYM_DOT} {records} paths {SYM_DOT} {groups} groups")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    processed: int,
    removed: int,
    outlines: int,
    errors: int = 0,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total processing time in seconds
        processed: Number of paths in the result
        removed: Number of paths that vanished
        outlines: Number of outlines added
        errors: Number of errors encountered
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {processed} paths {SYM_DOT} {removed} removed {SYM_DOT} {outlines} outlines "
        f"{SYM_DOT} [{error_style}]{errors} errors[/{error_style}]"
    )


def print_layout(result: LayoutResult, count: int) -> None:
    """Print copy positions and the shared scale."""
    console.print(f"\n{SYM_STEP} {count} copies {SYM_DOT} scale [bold]{result.scale:.4g}[/bold]")
    if not result.positions:
        console.print("  No positions (trace has no width)")
        return

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    for index, point in enumerate(result.positions, start=1):
        table.add_row(str(index), f"{point.x:.2f}", f"{point.y:.2f}")
    console.print(table)


def print_snap(source: str, index: int, entry: PaletteEntry) -> None:
    """Print the palette entry a color snapped to."""
    line = Text(f"  {source} {SYM_STEP} ")
    line.append(f"{index} ", style="bold")
    line.append(entry.hex, style=f"on {entry.hex}")
    line.append(f" {SYM_DOT} {entry.key}")
    console.print(line)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_summary(processed: int, pending: int) -> None:
    """Print cancellation summary."""
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} items completed {SYM_DOT} {pending} pending")
    console.print("  No output file created")
