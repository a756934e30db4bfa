"""Lazy entry points for the Gradio posture-angle demo; gradio is only imported on launch."""


def create_demo_app():
    from postureangle.demo.gradio_app import create_demo_app as _create_demo_app

    return _create_demo_app()


def main() -> None:
    from postureangle.demo.gradio_app import main as _main

    _main()


__all__ = ["create_demo_app", "main"]
