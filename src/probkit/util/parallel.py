"""process pool mapping for evaluating distributions over many points"""

import concurrent.futures as concurrentfutures
import multiprocessing
import warnings


def default_worker_count():
    """all available CPUs minus 1, but never less than 1"""
    return max(multiprocessing.cpu_count() - 1, 1)


class PicklableAndCallable:
    def __init__(self, func):
        self.func = func

    def __call__(self, *args, **kw):
        return self.func(*args, **kw)


def imap(f, s, max_workers=None, if_serial="ignore", chunksize=1):
    """
    Parameters
    ----------
    f : callable
        function that operates on values in s
    s : iterable
        series of inputs to f
    max_workers : int or None
        maximum number of workers. Defaults to 1-maximum available.
    if_serial : str
        action to take if conditions will result in serial execution. Valid
        values are 'raise', 'ignore', 'warn'. Defaults to 'ignore'.
    chunksize : int
        number of inputs sent to a worker at a time

    Returns
    -------
    generator yielding the result of f(s[i]). Output order matches the input order.
    """
    if_serial = if_serial.lower()
    assert if_serial in ("ignore", "raise", "warn"), f"invalid choice '{if_serial}'"

    if not max_workers:
        max_workers = default_worker_count()
    assert max_workers <= multiprocessing.cpu_count()

    if max_workers == 1:
        msg = "Execution in serial, only one worker is available"
        if if_serial == "raise":
            raise RuntimeError(msg)
        elif if_serial == "warn":
            warnings.warn(msg, UserWarning, stacklevel=2)

    f = PicklableAndCallable(f)
    with concurrentfutures.ProcessPoolExecutor(max_workers) as executor:
        yield from executor.map(f, s, chunksize=chunksize)

