import re
import threading
import time
from io import StringIO

import pytest

import ccdeps.tracing


class TestTracer:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.tracer = ccdeps.tracing.Tracer(enabled=True)

    def test_tracer_disabled(self):
        """Test that disabled tracer doesn't record anything"""
        tracer = ccdeps.tracing.Tracer(enabled=False)
        with tracer.span("test_op") as span:
            span.add_field("count", 3)

        assert span.fields == {}
        assert tracer.spans == []
        assert tracer.end(span) == 0.0

    def test_basic_span(self):
        span = self.tracer.start("test_operation")
        time.sleep(0.01)
        elapsed = self.tracer.end(span)

        assert elapsed > 0.0
        assert span.elapsed == elapsed
        assert self.tracer.spans == [span]

    def test_end_twice_records_once(self):
        span = self.tracer.start("op")
        self.tracer.end(span)
        assert self.tracer.end(span) == 0.0
        assert len(self.tracer.spans) == 1

    def test_fields(self):
        with self.tracer.span("detect_dependencies") as span:
            span.add_field("argc", 7)
            span.add_field("count", 2)

        assert list(span.fields.items()) == [("argc", 7), ("count", 2)]

    def test_span_closed_on_exception(self):
        with pytest.raises(RuntimeError):
            with self.tracer.span("failing") as span:
                raise RuntimeError("boom")

        assert span.end_time is not None
        assert self.tracer.find("failing") == [span]

    def test_nested_spans(self):
        with self.tracer.span("outer") as outer:
            with self.tracer.span("inner") as inner:
                pass

        assert inner.parent is outer
        assert outer.children == [inner]
        assert [span.name for span in self.tracer.spans] == ["inner", "outer"]

    def test_unended_child_is_dropped_from_the_stack(self):
        outer = self.tracer.start("outer")
        self.tracer.start("forgotten")
        self.tracer.end(outer)
        with self.tracer.span("next") as nxt:
            pass
        assert nxt.parent is None

    def test_threads_nest_independently(self):
        seen = {}

        def _worker(name):
            with self.tracer.span(name) as span:
                time.sleep(0.01)
                seen[name] = span

        with self.tracer.span("main"):
            thread = threading.Thread(target=_worker, args=("worker",))
            thread.start()
            thread.join()

        assert seen["worker"].parent is None

    def test_format_time(self):
        assert self.tracer.format_time(0.0005) == "500µs"
        assert self.tracer.format_time(0.0015) == "1.5ms"
        assert self.tracer.format_time(1.5) == "1.5s"
        assert self.tracer.format_time(90.0) == "1m30.0s"

    def test_report(self):
        with self.tracer.span("detect_dependencies") as span:
            span.add_field("count", 2)
            with self.tracer.span("child"):
                pass

        output = StringIO()
        self.tracer.report(1, file=output)
        lines = output.getvalue().splitlines()

        assert re.match(r"^detect_dependencies: \S+ count=2$", lines[0])
        assert re.match(r"^  child: \S+$", lines[1])

    def test_report_depth_follows_verbosity(self):
        with self.tracer.span("outer"):
            with self.tracer.span("inner"):
                pass

        output = StringIO()
        self.tracer.report(0, file=output)
        assert "inner" not in output.getvalue()

    def test_report_disabled_is_silent(self):
        tracer = ccdeps.tracing.Tracer(enabled=False)
        with tracer.span("op"):
            pass
        output = StringIO()
        tracer.report(3, file=output)
        assert output.getvalue() == ""


class TestDefaultTracer:
    def teardown_method(self):
        ccdeps.tracing.initialize_tracer(enabled=False)

    def test_initialize_replaces_the_default(self):
        tracer = ccdeps.tracing.initialize_tracer(enabled=True)
        assert ccdeps.tracing.get_tracer() is tracer

        with ccdeps.tracing.span("op") as span:
            span.add_field("x", 1)

        assert tracer.spans == [span]
        output = StringIO()
        ccdeps.tracing.report_tracing(1, file=output)
        assert "op:" in output.getvalue()
