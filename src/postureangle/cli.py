from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from postureangle.analysis.angle import (
    Point,
    compute_angle,
    compute_raw_angle,
    format_angle,
    make_landmark_set,
)
from postureangle.config import AppSettings, FacingMode, load_settings
from postureangle.errors import CaptureError
from postureangle.interaction.state import StateStore
from postureangle.io.camera import CaptureController
from postureangle.io.image_codec import read_image_file, write_image_rgb
from postureangle.viz.overlay import render_overlay

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Forward head posture angle from three landmarks on a photo.",
)
console = Console()


def _parse_point(value: str) -> Point:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 2:
        raise typer.BadParameter(f"Expected 'x,y', got: {value!r}", param_hint="--point")
    try:
        return Point(float(parts[0]), float(parts[1]))
    except ValueError as exc:
        raise typer.BadParameter(f"Coordinates must be numbers: {value!r}", param_hint="--point") from exc


def _load_settings_or_fail(path: Optional[Path]) -> AppSettings:
    try:
        return load_settings(path) if path is not None else load_settings()
    except (ValidationError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--settings") from exc


def _points_table(points: tuple[Point, Point, Point]) -> Table:
    table = Table(title="Landmarks")
    table.add_column("Index")
    table.add_column("x")
    table.add_column("y")
    for index, point in enumerate(points):
        table.add_row(str(index), f"{point.x:.1f}", f"{point.y:.1f}")
    return table


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("angle", context_settings={"ignore_unknown_options": True})
def angle(
    x0: float = typer.Argument(..., help="Point 1 x"),
    y0: float = typer.Argument(..., help="Point 1 y"),
    x1: float = typer.Argument(..., help="Point 2 x"),
    y1: float = typer.Argument(..., help="Point 2 y"),
    x2: float = typer.Argument(..., help="Point 3 x"),
    y2: float = typer.Argument(..., help="Point 3 y"),
) -> None:
    """Print the folded angle between segments p1-p2 and p2-p3."""
    points = make_landmark_set([(x0, y0), (x1, y1), (x2, y2)])
    console.print(f"{compute_angle(points):.2f}")


@app.command("measure")
def measure(
    image: Path = typer.Option(..., "--image", "-i", help="Photo to measure."),
    point: Optional[list[str]] = typer.Option(
        None,
        "--point",
        "-p",
        help="Landmark as 'x,y'. Give exactly three, or none to use the configured defaults.",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the overlay image here."),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings JSON file."),
) -> None:
    """Measure the angle for landmarks placed on an image."""
    settings = _load_settings_or_fail(settings_path)
    if point:
        if len(point) != 3:
            raise typer.BadParameter(f"Expected 3 points, got: {len(point)}", param_hint="--point")
        points = make_landmark_set(_parse_point(value) for value in point)
    else:
        points = make_landmark_set(settings.initial_points)

    try:
        captured = read_image_file(image)
    except CaptureError as exc:
        raise typer.BadParameter(str(exc), param_hint="--image") from exc

    store = StateStore.with_points(points)
    state = store.set_image(captured)

    console.print(_points_table(state.points))
    raw = compute_raw_angle(state.points)
    raw_text = f"{raw:.2f}" if raw is not None else "n/a"
    console.print(f"Image: {captured.filename} ({captured.width}x{captured.height})")
    console.print(f"Raw segment angle: {raw_text}")
    console.print(f"[bold]Angle between lines: {format_angle(state.angle)}[/bold]")

    if output is not None:
        overlay = render_overlay(
            captured.image_rgb,
            state.points,
            handle_diameter=settings.handle_diameter,
            line_width=settings.line_width,
        )
        try:
            written = write_image_rgb(output, overlay)
        except RuntimeError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc
        console.print(f"- Overlay: {written}")


@app.command("capture")
def capture(
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the JPEG still."),
    facing: FacingMode = typer.Option(FacingMode.user, "--facing", help="Camera facing mode."),
    warmup: float = typer.Option(1.0, "--warmup", min=0.0, help="Seconds to wait for the first frame."),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings JSON file."),
) -> None:
    """Grab a single still from the camera."""
    settings = _load_settings_or_fail(settings_path)
    store = StateStore.with_points(settings.initial_points)
    store.set_facing_mode(facing)
    controller = CaptureController(
        store,
        settings=settings,
        notify=lambda message: console.print(f"[red]{message}[/red]"),
    )
    try:
        try:
            controller.start_camera().result()
        except CaptureError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc

        deadline = time.monotonic() + warmup
        captured = controller.capture_frame()
        while captured is None and time.monotonic() < deadline:
            time.sleep(0.05)
            captured = controller.capture_frame()
        if captured is None:
            console.print("[red]Camera produced no frame.[/red]")
            raise typer.Exit(code=1)
    finally:
        controller.close()

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(captured.encoded)
    console.print(f"Captured {captured.width}x{captured.height} -> {output}")


@app.command("config")
def show_config(
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings JSON file."),
) -> None:
    """Print the effective settings."""
    console.print_json(data=_load_settings_or_fail(settings_path).as_summary())


@app.command("gui")
def gui() -> None:
    """Launch the desktop window."""
    from postureangle.desktop.app import main as desktop_main

    desktop_main()


@app.command("demo")
def demo(
    host: str = typer.Option("127.0.0.1", "--host", help="Host interface for the demo server."),
    port: int = typer.Option(7860, "--port", help="Port for the demo server."),
) -> None:
    """Launch the Gradio browser demo."""
    from postureangle.demo import create_demo_app

    create_demo_app().launch(server_name=host, server_port=port, share=False)
