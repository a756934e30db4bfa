from postureangle.analysis.angle import (
    LandmarkSet,
    Point,
    compute_angle,
    compute_raw_angle,
    format_angle,
    make_landmark_set,
    replace_point,
)

__all__ = [
    "LandmarkSet",
    "Point",
    "compute_angle",
    "compute_raw_angle",
    "format_angle",
    "make_landmark_set",
    "replace_point",
]
