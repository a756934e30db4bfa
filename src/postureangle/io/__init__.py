"""Image acquisition: camera streams and image files."""
