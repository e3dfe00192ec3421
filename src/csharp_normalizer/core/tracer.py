"""
Normalization Trace Logger.

This module records the step-by-step execution of the normalizer. It captures:
1. Lifecycle phases (passes and their stages).
2. Mapping matches (which rule rewrote which node type into which).
3. Failures reported by the engine.

The output is a structured list of event dictionaries suitable for JSON serialization.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  MAPPING_MATCH = "mapping_match"
  ERROR = "error"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records normalization events.
  Injected into the engine and handed to every stage through the context.
  """

  def __init__(self, record_matches: bool = True):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []  # Stack of phase IDs
    self.record_matches = record_matches

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase (e.g., 'preprocess'). Returns Phase ID."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None

    event = TraceEvent(
      id=phase_id,
      type=TraceEventType.PHASE_START,
      timestamp=time.time(),
      description=name,
      parent_id=parent,
      metadata={"detail": description},
    )
    self._events.append(event)
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self):
    """Ends the current active phase."""
    if not self._active_phases:
      return

    phase_id = self._active_phases.pop()
    event = TraceEvent(
      id=str(uuid.uuid4()),
      type=TraceEventType.PHASE_END,
      timestamp=time.time(),
      description="End Phase",
      parent_id=phase_id,
    )
    self._events.append(event)

  def log_match(self, mapping: str, source_type: str, target_type: str):
    """Logs that a mapping rewrote a node."""
    if not self.record_matches:
      return
    self._log_simple(
      TraceEventType.MAPPING_MATCH,
      f"Mapped {source_type or '<untyped>'} -> {target_type or '<untyped>'}",
      {"mapping": mapping, "source": source_type, "target": target_type},
    )

  def log_error(self, message: str):
    self._log_simple(TraceEventType.ERROR, message, {"level": "error"})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]):
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]


_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  return _GLOBAL_TRACER


def reset_tracer():
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
