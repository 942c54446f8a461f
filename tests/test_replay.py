import json
from io import StringIO
from types import SimpleNamespace

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from nestreport.cli import app
from nestreport.events import End, EventSource, TestFail, TestPass
from nestreport.runners.replay import EventRecord, Replayer, load_event_log

RUN = """
events:
  - {event: start}
  - {event: suite, title: Math}
  - {event: test, title: adds}
  - {event: output, text: "hi from adds\\n"}
  - {event: pass, title: adds, duration_ms: 5}
  - {event: test, title: divides}
  - {event: pass, title: divides, duration_ms: 90}
  - {event: pending, title: later}
  - {event: suite end}
  - {event: end, duration_ms: 95}
"""

FAILING = [
    {"event": "start"},
    {"event": "suite", "title": "Math"},
    {"event": "test", "title": "breaks"},
    {"event": "output", "text": "about to fail\n", "stream": "stderr"},
    {"event": "fail", "title": "breaks", "error": {"message": "expected 1 to equal 2"}},
    {"event": "suite end"},
    {"event": "end"},
]


class Collector:
    def __init__(self):
        self.events = []

    def on_event(self, event):
        self.events.append(event)


@pytest.fixture
def run_file(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(RUN)
    return path


class TestEventLog:
    def test_mapping_with_events_key(self, run_file):
        records = load_event_log(str(run_file))
        assert [r.event for r in records][:3] == ["start", "suite", "test"]

    def test_plain_json_list(self, tmp_path):
        path = tmp_path / "run.json"
        path.write_text(json.dumps(FAILING))
        assert len(load_event_log(str(path))) == len(FAILING)

    def test_unknown_event_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- {event: explode}\n")
        with pytest.raises(ValidationError):
            load_event_log(str(path))


class TestReplayer:
    def test_speed_derived_and_end_counters_filled(self, run_file):
        source = EventSource()
        seen = source.subscribe(Collector())
        streams = SimpleNamespace(stdout=StringIO(), stderr=StringIO())
        Replayer(source, slow_ms=75, streams=streams).run(load_event_log(str(run_file)))
        passes = [e for e in seen.events if isinstance(e, TestPass)]
        assert [p.speed for p in passes] == ["fast", "slow"]
        assert seen.events[-1] == End(passes=2, pending=1, failures=0, duration_ms=95)
        assert streams.stdout.getvalue() == "hi from adds\n"

    def test_string_error_becomes_error_info(self):
        event = EventRecord(event="fail", title="t", error="nope").to_event(None)
        assert isinstance(event, TestFail)
        assert event.error.message == "nope"


class TestCli:
    def test_replay_passing_run(self, run_file):
        result = CliRunner().invoke(app, ["replay", str(run_file), "--no-color", "--no-debug"])
        assert result.exit_code == 0, result.output
        assert "[Math]" in result.output
        assert "adds" in result.output
        assert "divides (90ms)" in result.output
        assert "2 passing" in result.output
        assert "1 pending" in result.output
        assert "hi from adds" not in result.output

    def test_replay_debug_shows_captured_output(self, run_file):
        result = CliRunner().invoke(app, ["replay", str(run_file), "--no-color", "--debug"])
        assert result.exit_code == 0, result.output
        assert ">>> logs: hi from adds" in result.output

    def test_replay_failing_run_exits_nonzero(self, tmp_path):
        path = tmp_path / "fail.json"
        path.write_text(json.dumps(FAILING))
        result = CliRunner().invoke(app, ["replay", str(path), "--no-color", "--no-debug"])
        assert result.exit_code == 1
        assert "1) breaks" in result.output
        assert ">>> logs: about to fail" in result.output
        assert ">>> logs: expected 1 to equal 2" in result.output
        assert "1 failing" in result.output

    def test_end_record_failures_set_exit_code(self, tmp_path):
        path = tmp_path / "counted.json"
        path.write_text(json.dumps([{"event": "start"}, {"event": "end", "failures": 1, "passes": 0}]))
        result = CliRunner().invoke(app, ["replay", str(path), "--no-color", "--no-debug"])
        assert "1 failing" in result.output
        assert result.exit_code == 1

    def test_replay_config_file(self, run_file, tmp_path):
        cfg = tmp_path / "reporter.yaml"
        cfg.write_text("slow_ms: 1000\nlog_marker: '| '\nverbose: true\n")
        result = CliRunner().invoke(app, ["replay", str(run_file), "--no-color", "-c", str(cfg)])
        assert result.exit_code == 0, result.output
        assert "divides (90ms)" not in result.output
        assert "| hi from adds" in result.output

    def test_humanize(self):
        result = CliRunner().invoke(app, ["humanize", "61000"])
        assert result.exit_code == 0
        assert result.output.strip() == "1 minute 1 second"
