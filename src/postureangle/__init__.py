"""Forward head posture angle measurement from a captured photo."""

from postureangle.analysis.angle import Point, compute_angle, format_angle

__all__ = ["Point", "compute_angle", "format_angle"]
__version__ = "0.1.0"
