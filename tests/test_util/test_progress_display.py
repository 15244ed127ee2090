import pytest
from tqdm import tqdm

from probkit.util.progress_display import (
    NULL_CONTEXT,
    ProgressContext,
    display_wrap,
)


class RecordingBar:
    """stands in for a tqdm progress bar, recording what it was told"""

    instances = []

    def __init__(self, **kw):
        self.kw = kw
        self.n = 0
        self.descriptions = []
        self.positions = []
        self.closed = False
        RecordingBar.instances.append(self)

    def set_description(self, desc, refresh=True):
        self.descriptions.append(desc)

    def refresh(self):
        self.positions.append(self.n)

    def close(self):
        self.closed = True


@pytest.fixture
def recorder():
    RecordingBar.instances = []
    yield RecordingBar
    RecordingBar.instances = []


def test_series_reports_progress(recorder):
    ctx = ProgressContext(recorder, depth=0)
    got = list(ctx.series([10, 20, 30, 40], noun="cdf"))
    assert got == [10, 20, 30, 40]
    (bar,) = recorder.instances
    assert bar.descriptions == ["cdf 1/4", "cdf 2/4", "cdf 3/4", "cdf 4/4"]
    assert bar.positions == [0.0, 0.25, 0.5, 0.75, 1.0]
    ctx.done()
    assert bar.closed
    assert ctx.progress_bar is None


def test_series_empty(recorder):
    ctx = ProgressContext(recorder)
    assert list(ctx.series([])) == []
    assert recorder.instances == []


def test_map(recorder):
    ctx = ProgressContext(recorder)
    got = ctx.map(lambda x: x + 1, [1, 2, 3], noun="pdf")
    assert got == [2, 3, 4]


def test_subcontext_depth():
    ctx = ProgressContext(tqdm, depth=0, mininterval=0.5)
    sub = ctx.subcontext()
    assert sub.depth == 1
    assert sub.progress_bar_type is tqdm
    assert sub.mininterval == 0.5


def test_null_context():
    assert NULL_CONTEXT.subcontext() is NULL_CONTEXT
    assert NULL_CONTEXT.map(abs, [-1, -2]) == [1, 2]
    NULL_CONTEXT.display("ignored", progress=0.5)
    assert NULL_CONTEXT.progress_bar is None


@display_wrap
def _uses_ui(values, ui=None):
    return ui, ui.map(abs, values)


def test_display_wrap_default_silent():
    ui, got = _uses_ui([-1, 2])
    assert ui is NULL_CONTEXT
    assert got == [1, 2]


def test_display_wrap_show_progress(capsys):
    ui, got = _uses_ui([-1, 2, -3], show_progress=True)
    assert isinstance(ui, ProgressContext)
    assert ui is not NULL_CONTEXT
    assert ui.depth == 0
    # bar closed once the function returns
    assert ui.progress_bar is None
    assert got == [1, 2, 3]


@display_wrap
def _outer(ui=None):
    return ui, _uses_ui([1], show_progress=True)[0]


def test_display_wrap_nested(capsys):
    outer, inner = _outer(show_progress=True)
    assert inner.depth == outer.depth + 1
