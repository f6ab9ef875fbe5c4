"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from isomill.domain import BoundingBox, Mill

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_WARN = "!"  # Warning
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for region processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Isomill[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_layer_info(path: str, regions: int, bounds: BoundingBox, units: str) -> None:
    """Print layer information.

    Args:
        path: Path to the geometry file
        regions: Number of copper regions after import
        bounds: Bounding box in physical units
        units: Name of the physical unit
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(path)
    console.print(line)
    console.print(
        f"  {regions:,} regions {SYM_DOT} "
        f"{bounds.width:.3f} × {bounds.height:.3f} {units}"
    )


def print_mill_info(mill: Mill, units: str) -> None:
    """Print tool configuration.

    Args:
        mill: Tool description
        units: Name of the physical unit
    """
    console.print(
        f"  {mill.kind.value} {SYM_DOT} {mill.tool_diameter:g} {units} "
        f"{SYM_DOT} {mill.passes} pass{'es' if mill.passes != 1 else ''}"
    )


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
    total_time_s: float,
    toolpaths: int,
    points: int,
    length: float,
    units: str,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        total_time_s: Total generation time in seconds
        toolpaths: Number of toolpaths written
        points: Total number of points written
        length: Total cutting length
        units: Name of the physical unit
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)

    console.print(
        f"  {toolpaths} toolpaths {SYM_DOT} {points:,} points {SYM_DOT} "
        f"{length:.1f} {units} cut"
    )


def print_contention_warning(clipped_passes: int) -> None:
    """Print the best-effort clearance warning.

    Args:
        clipped_passes: Number of passes clipped short of the tool clearance
    """
    console.print(
        f"\n[bold yellow]{SYM_WARN} Warning:[/bold yellow] clearance requirements "
        f"not fulfilled in {clipped_passes} passes"
    )
    console.print("  A best effort approach was used. Check the output and")
    console.print("  possibly use a smaller milling width.")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
