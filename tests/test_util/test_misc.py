"""Unit tests for utility functions."""

from probkit.util.misc import in_jupyter


def test_not_in_jupyter():
    assert not in_jupyter()


def test_is_in_jupyter():
    # in_jupyter relies entirely on whether a get_ipython variable exists in
    # the name space
    import probkit.util.misc as module

    module.get_ipython = lambda x: x
    assert in_jupyter()
    del module.get_ipython
