"""probkit: CDFs, quantiles, densities and sampling for the Beta, Gaussian
and Uniform distributions, built on careful implementations of the
regularised incomplete beta function, its inverse and the normal quantile."""

import logging
import os
import typing
import warnings
from importlib import import_module

from probkit._version import __version__

__copyright__ = "Copyright 2024-date, The probkit Project"
__credits__ = "https://github.com/probkit/probkit/graphs/contributors"
__license__ = "BSD-3"


def __getattr__(name: str) -> typing.Any:
    if name not in _import_mapping:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name = _import_mapping[name]
    module = import_module(f".{module_name}", package=__name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


_import_mapping = {
    "Beta": "maths.stats.distribution",
    "Gaussian": "maths.stats.distribution",
    "Uniform": "maths.stats.distribution",
    "InvalidParameter": "maths.stats.distribution",
    "make_generator": "maths.stats.distribution",
    "cdf": "maths.stats.distribution",
    "inv_cdf": "maths.stats.distribution",
    "pdf": "maths.stats.distribution",
    "sample": "maths.stats.distribution",
    "ConvergenceFailure": "maths.stats.special",
    "incomplete_beta": "maths.stats.special",
    "inverse_incomplete_beta": "maths.stats.special",
    "ln_beta": "maths.stats.special",
    "ndtri": "maths.stats.special",
}


def __dir__() -> list[str]:
    return list(_import_mapping.keys()) + list(globals().keys())


__all__ = list(_import_mapping.keys())

version = __version__
version_info = tuple(int(v) for v in version.split(".") if v.isdigit())


warn_env = "PROBKIT_WARNINGS"

if warn := os.environ.get(warn_env):
    warnings.simplefilter(warn)


logging.getLogger(__name__).addHandler(logging.NullHandler())
