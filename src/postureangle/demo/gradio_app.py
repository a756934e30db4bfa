import argparse
from typing import Any, Sequence

import numpy as np

from postureangle.analysis.angle import Point, compute_angle, format_angle, make_landmark_set, replace_point
from postureangle.config import DEFAULT_POINTS
from postureangle.viz.overlay import render_overlay

POINT_CHOICES = ["Point 1", "Point 2", "Point 3"]

NOTICE = (
    "## Posture Angle Demo\n"
    "Take a photo with the webcam or upload one, pick a point, then click on the image to move it. "
    "Local use only: share is disabled."
)


def _point_choice_to_index(choice: str) -> int:
    try:
        return POINT_CHOICES.index(str(choice).strip())
    except ValueError as exc:
        valid = ", ".join(POINT_CHOICES)
        raise ValueError(f"Unsupported point '{choice}'. Expected one of: {valid}") from exc


def _default_points_state() -> list[list[float]]:
    return [list(point) for point in DEFAULT_POINTS]


def _state_to_points(points_state: Sequence[Sequence[float]] | None) -> tuple[Point, Point, Point]:
    if not points_state:
        return make_landmark_set(DEFAULT_POINTS)
    return make_landmark_set(points_state)


def _place_point(
    points_state: Sequence[Sequence[float]] | None,
    choice: str,
    xy: Sequence[float],
) -> list[list[float]]:
    index = _point_choice_to_index(choice)
    points = replace_point(_state_to_points(points_state), index, Point(float(xy[0]), float(xy[1])))
    return [[point.x, point.y] for point in points]


def _angle_markdown(points_state: Sequence[Sequence[float]] | None) -> str:
    return f"### Angle between lines: {format_angle(compute_angle(_state_to_points(points_state)))}"


def _render(image: np.ndarray | None, points_state: Sequence[Sequence[float]] | None) -> Any:
    if image is None:
        return None
    return render_overlay(image[:, :, :3], _state_to_points(points_state), show_angle=False)


def _next_choice(choice: str) -> str:
    return POINT_CHOICES[(_point_choice_to_index(choice) + 1) % len(POINT_CHOICES)]


def create_demo_app() -> Any:
    try:
        import gradio as gr
    except Exception as exc:
        raise RuntimeError(
            "Gradio is not installed. Install demo dependencies:\n"
            'python -m pip install -e ".[dev,demo]"'
        ) from exc

    def on_image(image: np.ndarray | None, points_state: list[list[float]]) -> tuple[Any, str]:
        return _render(image, points_state), _angle_markdown(points_state)

    def on_select(
        image: np.ndarray | None,
        points_state: list[list[float]],
        choice: str,
        evt: gr.SelectData,
    ) -> tuple[Any, list[list[float]], str, str]:
        if image is None or evt.index is None:
            return _render(image, points_state), points_state, _angle_markdown(points_state), choice
        updated = _place_point(points_state, choice, evt.index)
        return _render(image, updated), updated, _angle_markdown(updated), _next_choice(choice)

    def on_reset(image: np.ndarray | None) -> tuple[Any, list[list[float]], str]:
        points_state = _default_points_state()
        return _render(image, points_state), points_state, _angle_markdown(points_state)

    with gr.Blocks(title="Posture Angle Demo") as demo:
        gr.Markdown(NOTICE)
        points_state = gr.State(_default_points_state())

        with gr.Row():
            image_input = gr.Image(label="Photo", sources=["webcam", "upload"], type="numpy")
            overlay_output = gr.Image(label="Landmarks (click to place)", type="numpy", interactive=False)

        with gr.Row():
            choice_input = gr.Radio(label="Point to place", choices=POINT_CHOICES, value=POINT_CHOICES[0])
            reset_button = gr.Button("Reset points")

        angle_output = gr.Markdown(_angle_markdown(None))

        image_input.change(fn=on_image, inputs=[image_input, points_state], outputs=[overlay_output, angle_output])
        overlay_output.select(
            fn=on_select,
            inputs=[image_input, points_state, choice_input],
            outputs=[overlay_output, points_state, angle_output, choice_input],
        )
        reset_button.click(fn=on_reset, inputs=[image_input], outputs=[overlay_output, points_state, angle_output])

    return demo


def main() -> None:
    parser = argparse.ArgumentParser(description="Posture angle Gradio local demo app")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface for local demo server")
    parser.add_argument("--port", type=int, default=7860, help="Port for local demo server")
    args = parser.parse_args()

    demo = create_demo_app()
    demo.launch(server_name=args.host, server_port=args.port, share=False)


if __name__ == "__main__":
    main()
