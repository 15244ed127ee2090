"""Generally useful utility functions."""


def in_jupyter() -> bool:
    """whether code is being executed within a jupyter notebook"""
    return callable(globals().get("get_ipython"))
