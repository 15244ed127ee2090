"""Special functions underlying the Beta and Gaussian distributions.

The regularised incomplete beta function follows Majumder & Bhattacharjee
(1973), Applied Statistics algorithm AS 63. Its inverse follows Cran, Martin &
Thomas (1977), AS 109, with the tolerance remark of Berry et al. (AS R83).
The normal quantile is Wichura's (1988) AS 241, PPND16.
"""

import logging

from numpy import ceil, exp, fabs, finfo, floor, inf, isfinite, isnan, log, sqrt
from scipy.special import gammaln


logger = logging.getLogger(__name__)

SERIES_TOLERANCE = 1e-15  # absolute and relative stopping bound for AS 63
MAX_SERIES_TERMS = 1000  # terms allowed beyond those the rate of decay requires
MAX_ITERATIONS = 1000  # Newton steps allowed in inverse_incomplete_beta

SAE = -30  # most negative decimal exponent used as a tolerance
FPU = 10.0**SAE

# a converged quantile must match alpha to this relative precision, unless the
# Newton step is already within a few units of float resolution of x
RESIDUAL_TOLERANCE = 1e-10
RESOLUTION = 4 * finfo(float).eps

# starting estimates are kept away from the singularities of log(x), log(1-x)
LOWER_START = 1e-4
UPPER_START = 0.9999


class ConvergenceFailure(ArithmeticError):
    """raised when an iterative approximation exhausts its iteration cap"""

    def __init__(self, msg, iterations=None, estimate=None):
        super().__init__(msg)
        self.iterations = iterations
        self.estimate = estimate


def polevl(x, coef):
    """evaluates a polynomial y = C_0 + C_1x + C_2x^2 + ... + C_Nx^N

    Coefficients are stored in reverse order, i.e. coef[0] = C_N
    """
    result = 0
    for c in coef:
        result = result * x + c
    return result


def ln_beta(p, q):
    """Returns the natural log of the complete beta function B(p, q).

    Parameters
    ----------
    p, q
        shape parameters, both > 0

    Notes
    -----
    Distributions compute this once at construction and pass it to
    incomplete_beta and inverse_incomplete_beta on every call.
    """
    if p <= 0 or q <= 0:
        raise ValueError(f"ln_beta: p and q must both be > 0, got {p}, {q}")
    return float(gammaln(p) + gammaln(q) - gammaln(p + q))


def _check_shapes(func, p, q):
    if p <= 0 or q <= 0:
        raise ValueError(f"{func}: p and q must both be > 0, got {p}, {q}")


def _series_terms(xx, tolerance):
    """terms needed for xx**n to fall below tolerance"""
    if xx >= 1.0:
        return 0
    return int(ceil(log(tolerance) / log(xx)))


def incomplete_beta(
    x, p, q, ln_b=None, tolerance=SERIES_TOLERANCE, max_terms=MAX_SERIES_TERMS
):
    """Returns the regularised incomplete beta function I_x(p, q).

    Parameters
    ----------
    x
        upper limit of integration. Values <= 0 give 0, values >= 1 give 1.
    p, q
        shape parameters, both > 0
    ln_b
        natural log of the complete beta function B(p, q). Computed if not
        provided.
    tolerance
        the series stops once a term is below this both absolutely and
        relative to the running sum
    max_terms
        terms allowed beyond those used by Soper's reduction and those the
        geometric decay of the series needs to reach tolerance

    Returns
    -------
    float in [0, 1], or nan for a nan x

    Raises
    ------
    ConvergenceFailure
        if the series does not satisfy tolerance within the term cap
    """
    _check_shapes("incomplete_beta", p, q)
    if isnan(x):
        return float(x)
    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0
    if ln_b is None:
        ln_b = ln_beta(p, q)

    psq = p + q
    # the series converges faster in the tail below the mean
    flipped = p < psq * x
    if flipped:
        xx, cx, pp, qq = 1.0 - x, x, q, p
    else:
        xx, cx, pp, qq = x, 1.0 - x, p, q

    # Soper's reduction: descending integer coefficients for the first ns
    # terms, then ascending real ones
    ns = int(qq + cx * psq)
    limit = max_terms + ns + _series_terms(xx, tolerance)
    rx = xx / cx
    term = 1.0
    ai = 1.0
    value = 1.0
    temp = qq - ai
    if ns == 0:
        rx = xx

    for _ in range(limit):
        term = term * temp * rx / (pp + ai)
        value += term
        temp = fabs(term)
        if temp <= tolerance and temp <= tolerance * value:
            break
        ai += 1.0
        ns -= 1
        if ns >= 0:
            temp = qq - ai
            if ns == 0:
                rx = xx
        else:
            temp = psq
            psq += 1.0
    else:
        raise ConvergenceFailure(
            f"incomplete_beta: series did not converge in {limit} terms "
            f"for x={x}, p={p}, q={q}",
            iterations=limit,
            estimate=value,
        )

    value = value * exp(pp * log(xx) + (qq - 1.0) * log(cx) - ln_b) / pp
    value = float(value)
    return 1.0 - value if flipped else value


def _hastings(a):
    """normal deviate approximation for a lower tail probability a <= 0.5"""
    r = sqrt(-2.0 * log(a))
    return r - (2.30753 + 0.27061 * r) / (1.0 + (0.99229 + 0.04481 * r) * r)


def _initial_beta_estimate(a, pp, qq, ln_b):
    """closed form starting point for inverting I_x(pp, qq) = a, a <= 0.5"""
    y = _hastings(a)
    if pp > 1 and qq > 1:
        # Carter's form of the Fisher-Cochran approximation
        r = (y * y - 3.0) / 6.0
        s = 1.0 / (pp + pp - 1.0)
        t = 1.0 / (qq + qq - 1.0)
        h = 2.0 / (s + t)
        w = y * sqrt(h + r) / h - (t - s) * (r + 5.0 / 6.0 - 2.0 / (3.0 * h))
        return pp / (pp + qq * exp(w + w))

    # chi-square approximation
    r = qq + qq
    t = 1.0 / (9.0 * qq)
    t = r * (1.0 - t + y * sqrt(t)) ** 3
    if t <= 0:
        return 1.0 - exp((log((1.0 - a) * qq) + ln_b) / qq)

    t = (4.0 * pp + r - 2.0) / t
    if t <= 1:
        return exp((log(a * pp) + ln_b) / pp)
    return 1.0 - 2.0 / (t + 1.0)


def inverse_incomplete_beta(alpha, p, q, ln_b=None, max_iterations=MAX_ITERATIONS):
    """Returns x such that I_x(p, q) = alpha.

    Parameters
    ----------
    alpha
        probability. Values <= 0 give 0, values >= 1 give 1.
    p, q
        shape parameters, both > 0
    ln_b
        natural log of the complete beta function B(p, q). Computed if not
        provided.
    max_iterations
        cap on the number of Newton-Raphson steps

    Returns
    -------
    float in [0, 1], or nan for a nan alpha

    Raises
    ------
    ConvergenceFailure
        if the iteration cap is reached before the stopping criteria are met,
        or the residual is no longer finite

    Notes
    -----
    A closed form approximation is refined by a modified Newton-Raphson
    iteration. Each step is scaled down by factors of 3 until its square is
    below the previous accepted square and it stays inside [0, 1]. The
    residual is (I_x - alpha) / beta_pdf(x), so the unscaled step is the plain
    Newton correction. A small step alone is not accepted as convergence: the
    probability must also match alpha, unless the step is already at the
    float resolution of x. Once converged, the corrected point is returned.
    """
    _check_shapes("inverse_incomplete_beta", p, q)
    if isnan(alpha):
        return float(alpha)
    if alpha <= 0:
        return 0.0
    if alpha >= 1:
        return 1.0
    if ln_b is None:
        ln_b = ln_beta(p, q)

    # solve in the lower tail, swapping the shapes for alpha > 0.5
    flipped = alpha > 0.5
    if flipped:
        a, pp, qq = 1.0 - alpha, q, p
    else:
        a, pp, qq = alpha, p, q

    x = float(_initial_beta_estimate(a, pp, qq, ln_b))
    x = min(max(x, LOWER_START), UPPER_START)
    logger.debug("inverse_incomplete_beta start=%r for a=%r, p=%r, q=%r", x, a, pp, qq)

    r = 1.0 - pp
    t = 1.0 - qq
    yprev = 0.0
    sq = 1.0
    prev = 1.0
    acu = 10.0 ** max(SAE, floor(-5.0 / pp / pp - a**-0.2 - 13.0))

    for iteration in range(1, max_iterations + 1):
        diff = incomplete_beta(x, pp, qq, ln_b) - a
        y = diff * exp(ln_b + r * log(x) + t * log(1.0 - x))
        if not isfinite(y):
            logger.warning(
                "inverse_incomplete_beta residual overflowed at x=%r after %d steps",
                x,
                iteration,
            )
            raise ConvergenceFailure(
                f"inverse_incomplete_beta: residual not finite at x={x}",
                iterations=iteration,
                estimate=1.0 - x if flipped else x,
            )
        if y * yprev <= 0:
            prev = max(sq, FPU)

        g = 1.0
        while True:
            while True:
                adj = g * y
                sq = adj * adj
                if sq < prev:
                    tx = x - adj
                    if 0.0 <= tx <= 1.0:
                        break
                g /= 3.0
            if (prev <= acu or y * y <= acu) and (
                fabs(diff) <= RESIDUAL_TOLERANCE * a or fabs(y) <= RESOLUTION * x
            ):
                # tx already carries the final correction
                logger.debug("inverse_incomplete_beta converged in %d steps", iteration)
                tx = float(tx)
                return 1.0 - tx if flipped else tx
            if tx != 0.0 and tx != 1.0:
                break
            g /= 3.0

        if tx == x:
            logger.debug("inverse_incomplete_beta stalled after %d steps", iteration)
            return 1.0 - x if flipped else x
        x = float(tx)
        yprev = y

    logger.warning(
        "inverse_incomplete_beta gave up after %d steps for alpha=%r, p=%r, q=%r",
        max_iterations,
        alpha,
        p,
        q,
    )
    raise ConvergenceFailure(
        f"inverse_incomplete_beta: no convergence in {max_iterations} steps "
        f"for alpha={alpha}, p={p}, q={q}",
        iterations=max_iterations,
        estimate=1.0 - x if flipped else x,
    )


# Coefficients for ndtri follow, highest order first
SPLIT1 = 0.425
SPLIT2 = 5.0
CONST1 = 0.180625
CONST2 = 1.6

# central region, |p - 0.5| <= 0.425
PA = [
    2.5090809287301226727e3,
    3.3430575583588128105e4,
    6.7265770927008700853e4,
    4.5921953931549871457e4,
    1.3731693765509461125e4,
    1.9715909503065514427e3,
    1.3314166789178437745e2,
    3.3871328727963666080e0,
]

PB = [
    5.2264952788528545610e3,
    2.8729085735721942674e4,
    3.9307895800092710610e4,
    2.1213794301586595867e4,
    5.3941960214247511077e3,
    6.8718700749205790830e2,
    4.2313330701600911252e1,
    1.0,
]

# intermediate tails, sqrt(-log(min(p, 1 - p))) <= 5
PC = [
    7.74545014278341407640e-4,
    2.27238449892691845833e-2,
    2.41780725177450611770e-1,
    1.27045825245236838258e0,
    3.64784832476320460504e0,
    5.76949722146069140550e0,
    4.63033784615654529590e0,
    1.42343711074968357734e0,
]

PD = [
    1.05075007164441684324e-9,
    5.47593808499534494600e-4,
    1.51986665636164571966e-2,
    1.48103976427480074590e-1,
    6.89767334985100004550e-1,
    1.67638483018380384940e0,
    2.05319162663775882187e0,
    1.0,
]

# far tails
PE = [
    2.01033439929228813265e-7,
    2.71155556874348757815e-5,
    1.24266094738807843860e-3,
    2.65321895265761230930e-2,
    2.96560571828504891230e-1,
    1.78482653991729133580e0,
    5.46378491116411436990e0,
    6.65790464350110377720e0,
]

PF = [
    2.04426310338993978564e-15,
    1.42151175831644588870e-7,
    1.84631831751005468180e-5,
    7.86869131145613259100e-4,
    1.48753612908506148525e-2,
    1.36929880922735805310e-1,
    5.99832206555887937690e-1,
    1.0,
]


def ndtri(p):
    """Inverse of the standard normal distribution function.

    Returns -inf for p <= 0 and inf for p >= 1. Accurate to about 1 part in
    10**16 over the open interval, no iteration required.
    """
    if p <= 0.0:
        return -inf
    if p >= 1.0:
        return inf

    q = p - 0.5
    if fabs(q) <= SPLIT1:
        r = CONST1 - q * q
        return float(q * polevl(r, PA) / polevl(r, PB))

    r = p if q < 0 else 1.0 - p
    r = sqrt(-log(r))
    if r <= SPLIT2:
        r -= CONST2
        x = polevl(r, PC) / polevl(r, PD)
    else:
        r -= SPLIT2
        x = polevl(r, PE) / polevl(r, PF)

    return float(-x if q < 0 else x)
