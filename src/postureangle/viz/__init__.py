from postureangle.viz.overlay import hit_test, render_overlay, segment_pairs

__all__ = ["hit_test", "render_overlay", "segment_pairs"]
