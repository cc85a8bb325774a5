import sys
import threading
import time
from collections import OrderedDict
from contextlib import contextmanager


class Span:
    """A named, timed operation with arbitrary key/value facts attached."""

    def __init__(self, name, parent=None, enabled=True):
        self.name = name
        self.parent = parent
        self.enabled = enabled
        self.fields = OrderedDict()
        self.children = []
        self.start_time = None
        self.end_time = None

    def add_field(self, key, value):
        """Attach a fact to the span.  Ignored when tracing is disabled."""
        if self.enabled:
            self.fields[key] = value

    @property
    def elapsed(self):
        if self.start_time is None or self.end_time is None:
            return 0.0
        return self.end_time - self.start_time

    def __repr__(self):
        return "Span({0!r}, fields={1!r})".format(self.name, dict(self.fields))


class Tracer:
    """Tracer for the operations that ccdeps performs.

    Spans nest per thread.  Finished spans are kept in the order they ended.
    A disabled tracer still hands out spans but records nothing.
    """

    def __init__(self, enabled=False):
        self.enabled = enabled
        self.spans = []
        self._lock = threading.Lock()
        self._local = threading.local()

    def _stack(self):
        try:
            return self._local.stack
        except AttributeError:
            self._local.stack = []
            return self._local.stack

    def start(self, name):
        """Start a span as a child of the innermost open span."""
        if not self.enabled:
            return Span(name, enabled=False)

        stack = self._stack()
        parent = stack[-1] if stack else None
        span = Span(name, parent=parent)
        if parent is not None:
            parent.children.append(span)
        span.start_time = time.perf_counter()
        stack.append(span)
        return span

    def end(self, span):
        """End the span and record it.  Returns the elapsed time."""
        if not span.enabled or span.end_time is not None:
            return 0.0

        span.end_time = time.perf_counter()
        stack = self._stack()
        if span in stack:
            # Anything opened inside and never ended goes with it
            del stack[stack.index(span):]
        with self._lock:
            self.spans.append(span)
        return span.elapsed

    @contextmanager
    def span(self, name):
        """Context manager that opens a span for the duration of the block."""
        span = self.start(name)
        try:
            yield span
        finally:
            self.end(span)

    def find(self, name):
        """All the finished spans with the given name."""
        return [span for span in self.spans if span.name == name]

    def format_time(self, seconds):
        """Format time in microseconds for precision."""
        microseconds = seconds * 1_000_000
        if microseconds < 1000:
            return f"{microseconds:.0f}µs"
        elif microseconds < 1_000_000:
            return f"{microseconds / 1000:.1f}ms"
        elif seconds < 60.0:
            return f"{seconds:.1f}s"
        else:
            minutes = int(seconds // 60)
            secs = seconds % 60
            return f"{minutes}m{secs:.1f}s"

    def _format_fields(self, span):
        return " ".join(f"{key}={value}" for key, value in span.fields.items())

    def report(self, verbose_level, file=None):
        """Print the spans as an indented tree.  Each verbose level shows one more level of nesting."""
        if not self.enabled or not self.spans:
            return

        if file is None:
            file = sys.stderr

        roots = [span for span in self.spans if span.parent is None]
        for span in roots:
            self._report_span(span, file, 0, verbose_level)

    def _report_span(self, span, file, indent, max_depth):
        line = f"{'  ' * indent}{span.name}: {self.format_time(span.elapsed)}"
        fields = self._format_fields(span)
        if fields:
            line = " ".join([line, fields])
        print(line, file=file)

        if indent < max_depth:
            for child in span.children:
                if child.end_time is not None:
                    self._report_span(child, file, indent + 1, max_depth)


# Default tracer for the command line tools.  Library callers inject their own.
_global_tracer = Tracer()


def get_tracer():
    """Get the default tracer instance."""
    return _global_tracer


def initialize_tracer(enabled=False):
    """Replace the default tracer."""
    global _global_tracer
    _global_tracer = Tracer(enabled)
    return _global_tracer


def span(name):
    """Open a span on the default tracer."""
    return _global_tracer.span(name)


def report_tracing(verbose_level, file=None):
    """Print the report of the default tracer."""
    _global_tracer.report(verbose_level, file)
