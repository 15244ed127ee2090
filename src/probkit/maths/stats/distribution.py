"""Beta, Gaussian and Uniform distributions.

Each distribution holds its parameters, fixed at construction, and evaluates
its CDF, inverse CDF and PDF at a single point. The module level functions
cdf, inv_cdf, pdf and sample apply a distribution over many points.
"""

import logging
import time

from numpy import array, exp, inf, isfinite, pi, sqrt
from numpy.random import default_rng
from scipy.special import erf, xlog1py, xlogy

from probkit.maths.stats.special import (
    incomplete_beta,
    inverse_incomplete_beta,
    ln_beta,
    ndtri,
)
from probkit.util.progress_display import display_wrap


logger = logging.getLogger(__name__)

SQRT2 = sqrt(2.0)
SQRT2PI = sqrt(2.0 * pi)


class InvalidParameter(ValueError):
    """raised when a distribution is constructed with invalid parameters"""


def _check_finite(**params):
    for name, value in params.items():
        if not isfinite(value):
            raise InvalidParameter(f"{name} must be finite, got {value!r}")


def _check_interval(a, b):
    _check_finite(a=a, b=b)
    if a >= b:
        raise InvalidParameter(f"require a < b, got a={a!r}, b={b!r}")


def make_generator(seed=None):
    """returns a seedable random number generator for use with sample()

    The returned numpy Generator supplies random() (uniform on [0, 1)) and
    standard_normal(). Any object providing those two methods may be passed
    to a distribution's sample() method instead.
    """
    return default_rng(seed)


class _Continuous:
    """common interface for univariate continuous distributions"""

    __slots__ = ()

    def cdf(self, x):  # pragma: no cover
        raise NotImplementedError

    def inv_cdf(self, p):  # pragma: no cover
        raise NotImplementedError

    def pdf(self, x):  # pragma: no cover
        raise NotImplementedError

    def sample(self, rng):
        """draws a single value by inverse transform of rng.random()"""
        return self.inv_cdf(rng.random())

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __eq__(self, other):
        return type(self) is type(other) and self._params() == other._params()

    def __hash__(self):
        return hash((type(self).__name__,) + self._params())

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in zip(self.__slots__, self._params()))
        return f"{self.__class__.__name__}({args})"

    def __getstate__(self):
        return self._params()

    def __setstate__(self, state):
        self._initialise(*state)

    # alternative names for the same operations
    def cumulate(self, x):
        """same as cdf()"""
        return self.cdf(x)

    def decumulate(self, p):
        """same as inv_cdf()"""
        return self.inv_cdf(p)

    invert = decumulate

    def weigh(self, x):
        """same as pdf()"""
        return self.pdf(x)

    dense = weigh


class Beta(_Continuous):
    """Beta distribution with shapes alpha, beta on the interval [a, b]."""

    __slots__ = ("alpha", "beta", "a", "b", "ln_b")

    def __init__(self, alpha, beta, a=0.0, b=1.0):
        """
        Parameters
        ----------
        alpha, beta
            shape parameters, both > 0
        a, b
            the support, a < b

        Raises
        ------
        InvalidParameter
        """
        _check_finite(alpha=alpha, beta=beta)
        if alpha <= 0 or beta <= 0:
            raise InvalidParameter(
                f"alpha and beta must be > 0, got alpha={alpha!r}, beta={beta!r}"
            )
        _check_interval(a, b)
        self._initialise(alpha, beta, a, b)

    def _initialise(self, alpha, beta, a, b):
        set_ = object.__setattr__
        set_(self, "alpha", float(alpha))
        set_(self, "beta", float(beta))
        set_(self, "a", float(a))
        set_(self, "b", float(b))
        set_(self, "ln_b", ln_beta(alpha, beta))

    def _params(self):
        return (self.alpha, self.beta, self.a, self.b)

    def _standardise(self, x):
        return (x - self.a) / (self.b - self.a)

    def cdf(self, x):
        """probability of a value <= x, 0 below a and 1 above b"""
        return incomplete_beta(self._standardise(x), self.alpha, self.beta, self.ln_b)

    def inv_cdf(self, p):
        """the value with cdf equal to p, a for p <= 0 and b for p >= 1

        Raises
        ------
        ConvergenceFailure
            if the quantile iteration does not converge
        """
        x = inverse_incomplete_beta(p, self.alpha, self.beta, self.ln_b)
        return (self.b - self.a) * x + self.a

    def pdf(self, x):
        """density at x, 0 outside [a, b]"""
        if x < self.a or x > self.b:
            return 0.0
        scale = self.b - self.a
        x = self._standardise(x)
        # xlogy keeps 0 * log(0) at 0 for alpha == 1 or beta == 1
        log_density = (
            xlogy(self.alpha - 1.0, x) + xlog1py(self.beta - 1.0, -x) - self.ln_b
        )
        return float(exp(log_density) / scale)


class Gaussian(_Continuous):
    """Gaussian distribution with mean mu and variance sigma2.

    A zero variance gives a point mass at mu.
    """

    __slots__ = ("mu", "sigma2", "sigma")

    def __init__(self, mu=0.0, sigma2=1.0):
        _check_finite(mu=mu, sigma2=sigma2)
        if sigma2 < 0:
            raise InvalidParameter(f"sigma2 must be >= 0, got {sigma2!r}")
        self._initialise(mu, sigma2)

    def _initialise(self, mu, sigma2):
        object.__setattr__(self, "mu", float(mu))
        object.__setattr__(self, "sigma2", float(sigma2))
        object.__setattr__(self, "sigma", float(sqrt(sigma2)))

    def _params(self):
        return (self.mu, self.sigma2)

    def cdf(self, x):
        if self.sigma == 0:
            return 0.0 if x < self.mu else 1.0
        return float((1.0 + erf((x - self.mu) / (self.sigma * SQRT2))) / 2.0)

    def inv_cdf(self, p):
        """mu + sigma * ndtri(p), -inf for p <= 0 and inf for p >= 1"""
        if p <= 0:
            return -inf
        if p >= 1:
            return inf
        if self.sigma == 0:
            return self.mu
        return self.mu + self.sigma * ndtri(p)

    def pdf(self, x):
        if self.sigma == 0:
            return inf if x == self.mu else 0.0
        z = (x - self.mu) / self.sigma
        return float(exp(-z * z / 2.0) / (SQRT2PI * self.sigma))

    def sample(self, rng):
        """draws mu + sigma * Z, Z a standard normal deviate from rng"""
        return self.mu + self.sigma * float(rng.standard_normal())


class Uniform(_Continuous):
    """Uniform distribution on [a, b]."""

    __slots__ = ("a", "b")

    def __init__(self, a=0.0, b=1.0):
        _check_interval(a, b)
        self._initialise(a, b)

    def _initialise(self, a, b):
        object.__setattr__(self, "a", float(a))
        object.__setattr__(self, "b", float(b))

    def _params(self):
        return (self.a, self.b)

    def cdf(self, x):
        if x <= self.a:
            return 0.0
        if x >= self.b:
            return 1.0
        return (x - self.a) / (self.b - self.a)

    def inv_cdf(self, p):
        p = min(max(p, 0.0), 1.0)
        return (self.b - self.a) * p + self.a

    def pdf(self, x):
        if x < self.a or x > self.b:
            return 0.0
        return 1.0 / (self.b - self.a)


def _log_evaluation(tracker, dist, operation, num, taken):
    tracker.log_message(repr(dist), label="distribution")
    tracker.log_message(operation, label="operation")
    tracker.log_message(f"{num}", label="number of points")
    tracker.log_versions(["probkit", "numpy", "scipy"])
    tracker.log_message(f"{taken}", label="TIME TAKEN")


def _apply(dist, operation, points, parallel, par_kw, tracker, ui):
    start = time.time()
    points = [float(v) for v in points]
    func = getattr(dist, operation)
    values = array(
        ui.map(func, points, parallel=parallel, par_kw=par_kw, noun=operation),
        dtype=float,
    )
    taken = time.time() - start
    logger.debug("%s %s at %d points in %.3fs", dist, operation, len(points), taken)
    if tracker is not None:
        _log_evaluation(tracker, dist, operation, len(points), taken)
    return values


_batch_params = """
    Parameters
    ----------
    dist
        a Beta, Gaussian or Uniform instance
    points
        a sequence of floats
    parallel
        evaluate in a process pool
    par_kw
        keyword arguments for probkit.util.parallel.imap, e.g. max_workers
    logger
        a scitrack CachingLogger. If provided, the distribution, operation,
        number of points, package versions and time taken are recorded.
    show_progress
        display a progress bar

    Returns
    -------
    numpy float array, element i corresponding to points[i]
"""


def _extend_doc(func):
    func.__doc__ = func.__doc__ + _batch_params
    return func


@_extend_doc
@display_wrap
def cdf(dist, points, parallel=False, par_kw=None, logger=None, ui=None):
    """evaluates dist.cdf() at each of points"""
    return _apply(dist, "cdf", points, parallel, par_kw, logger, ui)


@_extend_doc
@display_wrap
def inv_cdf(dist, points, parallel=False, par_kw=None, logger=None, ui=None):
    """evaluates dist.inv_cdf() at each of points"""
    return _apply(dist, "inv_cdf", points, parallel, par_kw, logger, ui)


@_extend_doc
@display_wrap
def pdf(dist, points, parallel=False, par_kw=None, logger=None, ui=None):
    """evaluates dist.pdf() at each of points"""
    return _apply(dist, "pdf", points, parallel, par_kw, logger, ui)


def sample(dist, rng, count):
    """draws count values from dist using rng

    Parameters
    ----------
    dist
        a Beta, Gaussian or Uniform instance
    rng
        a generator from make_generator(), or any object with random() and
        standard_normal() methods
    count
        number of values

    Returns
    -------
    numpy float array of length count
    """
    return array([dist.sample(rng) for _ in range(count)], dtype=float)
