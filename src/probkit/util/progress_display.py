"""Progress bars for evaluating a distribution over many points."""

import functools
import threading
from collections.abc import Callable, Collection, Generator, Iterable, Sized
from typing import Any, ParamSpec, TypeVar

from tqdm import notebook, tqdm

from probkit.util import parallel as PAR
from probkit.util.misc import in_jupyter

P = ParamSpec("P")
R = TypeVar("R")
T = TypeVar("T")


class ProgressContext:
    def __init__(
        self,
        progress_bar_type: type[tqdm | notebook.tqdm] | None = None,
        depth: int = -1,
        message: str | None = None,
        mininterval: float = 1.0,
    ) -> None:
        self.progress_bar_type = progress_bar_type
        self.progress_bar: tqdm | notebook.tqdm | None = None
        self.progress: float = 0
        self.depth = depth
        self.message = message
        self.mininterval = mininterval

    def set_new_progress_bar(self) -> None:
        if self.progress_bar_type:
            self.progress_bar = self.progress_bar_type(
                total=1,
                position=self.depth,
                leave=True,
                bar_format="{desc} {percentage:3.0f}%|{bar}|{elapsed}<{remaining}",
                mininterval=self.mininterval,
                dynamic_ncols=True,
            )

    def subcontext(self, *args: Any, **kw: Any) -> "ProgressContext":
        return ProgressContext(
            progress_bar_type=self.progress_bar_type,
            depth=self.depth + 1,
            message=self.message,
            mininterval=self.mininterval,
        )

    def display(self, msg: str | None = None, progress: float | None = None) -> None:
        if not self.progress_bar:
            self.set_new_progress_bar()
        if self.progress_bar is None:
            return
        updated = False
        if progress is not None:
            self.progress = min(progress, 1.0)
            self.progress_bar.n = self.progress
            updated = True
        else:
            self.progress_bar.n = 1
        if msg is not None and msg != self.message:
            self.message = msg
            self.progress_bar.set_description(self.message, refresh=False)
            updated = True
        if updated:
            self.progress_bar.refresh()

    def done(self) -> None:
        if self.progress_bar:
            self.progress_bar.close()
            self.progress_bar = None

    def series(
        self,
        items: Iterable[T],
        noun: str = "",
        start: float | None = None,
        end: float = 1.0,
        count: int | None = None,
    ) -> Generator[T, None, None]:
        """Wrap a looped-over list with a progress bar"""
        if count is None:
            if not isinstance(items, Sized):
                items = list(items)
            count = len(items)
        if count == 0:
            return

        if start is None:
            start = 0.0
        step = (end - start) / count
        if noun:
            noun += " "
        template = f"{noun}%{len(str(count))}d/{count}"
        for i, item in enumerate(items):
            self.display(msg=template % (i + 1), progress=start + step * i)
            yield item
        self.display(progress=end)

    def imap(
        self,
        f: Callable[[T], R],
        s: Collection[T],
        parallel: bool = False,
        par_kw: dict[str, Any] | None = None,
        **kw: Any,
    ) -> Generator[R, None, None]:
        if parallel:
            par_kw = par_kw or {}
            results: Iterable[R] = PAR.imap(f, s, **par_kw)
        else:
            results = map(f, s)
        yield from self.series(results, count=len(s), **kw)

    def map(self, f: Callable[[T], R], s: Collection[T], **kw: Any) -> list[R]:
        return list(self.imap(f, s, **kw))


class NullContext(ProgressContext):
    """A UI context which discards all output. The default for batch
    evaluation unless show_progress=True."""

    def subcontext(self, *args: Any, **kw: Any) -> "NullContext":
        return self

    def display(self, *args: Any, **kw: Any) -> None:
        pass

    def done(self) -> None:
        pass


NULL_CONTEXT = NullContext()
CURRENT = threading.local()
CURRENT.context = None


def display_wrap(slow_function: Callable[P, R]) -> Callable[P, R]:
    """Decorator which give the function its own UI context.

    The function will receive an extra argument, 'ui', which is used to
    report progress. Progress is only shown when the caller passes
    show_progress=True.
    """

    @functools.wraps(slow_function)
    def f(*args: P.args, **kw: P.kwargs) -> R:
        if getattr(CURRENT, "context", None) is None:
            CURRENT.context = NULL_CONTEXT
        parent = CURRENT.context
        show_progress = kw.pop("show_progress", False)
        if not show_progress:
            subcontext = NULL_CONTEXT
        elif parent is NULL_CONTEXT:
            klass = notebook.tqdm if in_jupyter() else tqdm
            subcontext = ProgressContext(klass, depth=0)
        else:
            subcontext = parent.subcontext()
        kw["ui"] = CURRENT.context = subcontext
        try:
            result = slow_function(*args, **kw)
        finally:
            CURRENT.context = parent
            subcontext.done()
        return result

    return f
