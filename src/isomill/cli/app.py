"""CLI application entry point for isomill.

This module provides the main CLI interface using Typer.
"""

import time
import warnings
from pathlib import Path
from typing import Annotated

import typer

from isomill import __version__
from isomill.cli.output import (
    console,
    create_progress,
    print_contention_warning,
    print_error,
    print_header,
    print_layer_info,
    print_mill_info,
    print_step,
    print_success,
)
from isomill.config import IsomillSettings, LoggingConfig, MillConfig
from isomill.core import RegionSurface
from isomill.domain import Mill, MillKind, Toolpath
from isomill.exceptions import ClearanceContention, IsomillError
from isomill.io import GeometryReader, SvgDebugSink, ToolpathWriter
from isomill.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="isomill",
    help="Generate PCB isolation milling and outline routing toolpaths from copper geometry.",
    add_completion=False,
    no_args_is_help=True,
)

InputOption = Annotated[
    Path,
    typer.Argument(
        help="Path to input GeoJSON/WKT geometry file",
        show_default=False,
    ),
]
OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output path (default: {name}-toolpaths.json)",
    ),
]
ToleranceOption = Annotated[
    float,
    typer.Option(
        "--tolerance",
        "-t",
        help="Path simplification tolerance in physical units",
        min=0.0,
    ),
]
OptimiseOption = Annotated[
    bool,
    typer.Option(
        "--optimise/--no-optimise",
        help="Simplify toolpaths within tolerance",
    ),
]
MirrorOption = Annotated[
    bool,
    typer.Option(
        "--mirror",
        help="Mirror toolpaths for the bottom side",
    ),
]
MirrorAbsoluteOption = Annotated[
    bool,
    typer.Option(
        "--mirror-absolute",
        help="Mirror across the minimum X instead of the board centre",
    ),
]
ScaleOption = Annotated[
    float | None,
    typer.Option(
        "--scale",
        help="Internal units per physical unit (default from settings)",
        min=1.0,
    ),
]
UnitsOption = Annotated[
    str,
    typer.Option(
        "--units",
        help="Name of the physical unit written to the output",
    ),
]
DebugDirOption = Annotated[
    Path | None,
    typer.Option(
        "--debug-dir",
        help="Write SVG debug images of cells and passes to this directory",
    ),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Write detailed logs to file",
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level (DEBUG|INFO|WARNING|ERROR)",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Verbose console output",
    ),
]
QuietOption = Annotated[
    bool,
    typer.Option(
        "--quiet",
        "-q",
        help="Minimal console output",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Isomill[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
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
    """Generate PCB isolation milling and outline routing toolpaths."""


@app.command()
def isolate(
    input_geometry: InputOption,
    output: OutputOption = None,
    tool_diameter: Annotated[
        float,
        typer.Option(
            "--tool-diameter",
            "-d",
            help="Isolation tool diameter in physical units",
        ),
    ] = 0.2,
    extra_passes: Annotated[
        int,
        typer.Option(
            "--extra-passes",
            "-e",
            help="Extra concentric isolation passes",
            min=0,
            max=50,
        ),
    ] = 0,
    tolerance: ToleranceOption = 0.0,
    optimise: OptimiseOption = False,
    mirror: MirrorOption = False,
    mirror_absolute: MirrorAbsoluteOption = False,
    mask: Annotated[
        Path | None,
        typer.Option(
            "--mask",
            "-m",
            help="Geometry file clipping all generated paths",
        ),
    ] = None,
    scale: ScaleOption = None,
    units: UnitsOption = "mm",
    debug_dir: DebugDirOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Generate isolation toolpaths around every copper region.

    Each region is isolated by growing it half a tool width per pass,
    never beyond the territory it shares with its neighbours.

    Example:
        isomill isolate top.geojson --tool-diameter 0.2 --extra-passes 1
    """
    settings = _build_settings(
        MillConfig(
            tool_diameter=tool_diameter,
            tolerance=tolerance,
            optimise=optimise,
            extra_passes=extra_passes,
            kind=MillKind.ISOLATOR,
        ),
        log_file=log_file,
        log_level=log_level,
        verbose=verbose,
        quiet=quiet,
    )
    _run(
        input_geometry,
        output=output,
        settings=settings,
        scale=scale,
        units=units,
        mirror=mirror,
        mirror_absolute=mirror_absolute,
        mask_path=mask,
        line_width=None,
        debug_dir=debug_dir,
        verbose=verbose,
        quiet=quiet,
    )


@app.command()
def outline(
    input_geometry: InputOption,
    line_width: Annotated[
        float,
        typer.Option(
            "--line-width",
            "-w",
            help="Width of the drawn outline in physical units",
            min=0.0,
        ),
    ],
    output: OutputOption = None,
    tool_diameter: Annotated[
        float,
        typer.Option(
            "--tool-diameter",
            "-d",
            help="Cutter diameter in physical units",
        ),
    ] = 2.0,
    tolerance: ToleranceOption = 0.0,
    optimise: OptimiseOption = False,
    mirror: MirrorOption = False,
    mirror_absolute: MirrorAbsoluteOption = False,
    scale: ScaleOption = None,
    units: UnitsOption = "mm",
    debug_dir: DebugDirOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Fill a drawn board outline and generate its routing toolpath.

    Example:
        isomill outline edge.geojson --line-width 0.15 --tool-diameter 2.0
    """
    settings = _build_settings(
        MillConfig(
            tool_diameter=tool_diameter,
            tolerance=tolerance,
            optimise=optimise,
            kind=MillKind.CUTTER,
        ),
        log_file=log_file,
        log_level=log_level,
        verbose=verbose,
        quiet=quiet,
    )
    _run(
        input_geometry,
        output=output,
        settings=settings,
        scale=scale,
        units=units,
        mirror=mirror,
        mirror_absolute=mirror_absolute,
        mask_path=None,
        line_width=line_width,
        debug_dir=debug_dir,
        verbose=verbose,
        quiet=quiet,
    )


def _build_settings(
    mill: MillConfig,
    log_file: Path | None,
    log_level: str,
    verbose: bool,
    quiet: bool,
) -> IsomillSettings:
    """Validate shared options and assemble settings."""
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    return IsomillSettings(
        mill=mill,
        logging=LoggingConfig(
            log_file=log_file,
            log_level="INFO" if verbose else log_level,
        ),
    )


def _load_surface(
    path: Path,
    settings: IsomillSettings,
    scale: float,
    debug_dir: Path | None = None,
) -> RegionSurface:
    """Read a geometry file into a rendered surface."""
    reader = GeometryReader(path, scale=scale)
    reader.load()

    surface = RegionSurface(
        name=path.stem,
        config=settings.geometry,
        debug_sink=SvgDebugSink(debug_dir) if debug_dir is not None else None,
    )
    surface.render(reader)
    return surface


def _run(
    input_geometry: Path,
    output: Path | None,
    settings: IsomillSettings,
    scale: float | None,
    units: str,
    mirror: bool,
    mirror_absolute: bool,
    mask_path: Path | None,
    line_width: float | None,
    debug_dir: Path | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Load, generate and write toolpaths for one layer."""
    # Validate input file exists
    if not input_geometry.is_file():
        print_error(
            f"Input file not found: {input_geometry}",
            details=f"The file '{input_geometry}' does not exist or is not a file.",
        )
        raise typer.Exit(code=1)

    if mask_path is not None and not mask_path.is_file():
        print_error(f"Mask file not found: {mask_path}")
        raise typer.Exit(code=1)

    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)

    scale = scale if scale is not None else settings.geometry.default_scale
    mill = settings.mill.to_mill()
    output_path = output if output is not None else ToolpathWriter.get_toolpath_path(input_geometry)

    try:
        if not quiet:
            print_step("Loading geometry")

        surface = _load_surface(input_geometry, settings, scale, debug_dir)

        mask_surface = None
        if mask_path is not None:
            mask_surface = _load_surface(mask_path, settings, scale)
            surface.attach_mask(mask_surface)

        if line_width is not None:
            surface.fill(line_width)

        if not quiet:
            print_layer_info(
                path=str(input_geometry),
                regions=len(surface.geometry.geoms),
                bounds=surface.bounding_box(),
                units=units,
            )
            print_mill_info(mill, units)
            print_step("Generating toolpaths")

        start_time = time.time()
        toolpaths, contention = _generate(surface, mill, mirror, mirror_absolute, quiet)
        elapsed = time.time() - start_time

        ToolpathWriter(output_path).write(toolpaths, mill=mill, units=units, layer=surface.name)

    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except IsomillError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if contention is not None and not quiet:
        print_contention_warning(contention.clipped_passes)

    if not quiet:
        print_success(
            output_path=str(output_path),
            total_time_s=elapsed,
            toolpaths=len(toolpaths),
            points=sum(len(toolpath) for toolpath in toolpaths),
            length=sum(toolpath.length() for toolpath in toolpaths),
            units=units,
        )
        if verbose and surface.last_stats is not None:
            stats = surface.last_stats
            console.print(
                f"  {stats.region_count} regions {stats.pass_count} passes "
                f"{stats.rings_emitted} rings"
            )


def _generate(
    surface: RegionSurface,
    mill: Mill,
    mirror: bool,
    mirror_absolute: bool,
    quiet: bool,
) -> tuple[list[Toolpath], ClearanceContention | None]:
    """Generate toolpaths, capturing the clearance warning for display."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ClearanceContention)

        if quiet:
            toolpaths = surface.generate(mill, mirror=mirror, mirror_absolute=mirror_absolute)
        else:
            region_count = len(surface.geometry.geoms)
            with create_progress() as progress:
                task_id = progress.add_task(
                    f"Isolating {region_count} regions",
                    total=region_count,
                )

                def update_progress(completed: int, *_: object) -> None:
                    progress.update(task_id, completed=completed)

                toolpaths = surface.generate(
                    mill,
                    mirror=mirror,
                    mirror_absolute=mirror_absolute,
                    progress_callback=update_progress,
                )

    contention = next(
        (item.message for item in caught if isinstance(item.message, ClearanceContention)),
        None,
    )
    return toolpaths, contention


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
