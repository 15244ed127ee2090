__all__ = [
    "misc",
    "parallel",
    "progress_display",
]
