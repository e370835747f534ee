"""LSM-tree storage parts: an append-only value log, table summaries and byte helpers."""

__version__ = "0.1.0"
__all__ = ["summary", "util", "vlog"]