"""Upload and serve image files from a flat local directory."""
