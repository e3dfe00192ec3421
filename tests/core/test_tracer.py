"""
Tests for the TraceLogger.
"""

from csharp_normalizer.core.tracer import TraceEventType, TraceLogger, get_tracer, reset_tracer


def count(tracer, typ):
  return sum(1 for e in tracer.export() if e["type"] == typ)


def test_nested_phases():
  tracer = TraceLogger()
  outer = tracer.start_phase("preprocess", "7 stages")
  inner = tracer.start_phase("erase trivia")
  tracer.end_phase()
  tracer.end_phase()

  events = tracer.export()
  assert [e["type"] for e in events] == [
    TraceEventType.PHASE_START,
    TraceEventType.PHASE_START,
    TraceEventType.PHASE_END,
    TraceEventType.PHASE_END,
  ]
  assert events[0]["parent_id"] is None
  assert events[0]["metadata"] == {"detail": "7 stages"}
  assert events[1]["parent_id"] == outer
  assert events[2]["parent_id"] == inner
  assert events[3]["parent_id"] == outer


def test_end_phase_without_start_is_ignored():
  tracer = TraceLogger()
  tracer.end_phase()
  assert tracer.export() == []


def test_log_match():
  tracer = TraceLogger()
  phase = tracer.start_phase("semantic")
  tracer.log_match("UsingDirective -> uast:Import", "UsingDirective", "uast:Import")
  tracer.log_match("remove empty identifiers", "IdentifierName", "")

  matches = [e for e in tracer.export() if e["type"] == TraceEventType.MAPPING_MATCH]
  assert matches[0]["parent_id"] == phase
  assert matches[0]["description"] == "Mapped UsingDirective -> uast:Import"
  assert matches[0]["metadata"] == {
    "mapping": "UsingDirective -> uast:Import",
    "source": "UsingDirective",
    "target": "uast:Import",
  }
  assert matches[1]["description"] == "Mapped IdentifierName -> <untyped>"
  assert count(tracer, TraceEventType.MAPPING_MATCH) == 2


def test_record_matches_disabled():
  tracer = TraceLogger(record_matches=False)
  tracer.log_match("m", "A", "B")
  tracer.log_error("boom")
  assert count(tracer, TraceEventType.MAPPING_MATCH) == 0
  assert count(tracer, TraceEventType.ERROR) == 1


def test_global_tracer_reset():
  get_tracer().log_error("x")
  reset_tracer()
  assert get_tracer().export() == []
