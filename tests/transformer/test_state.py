"""
Tests for variable bindings.
"""

import pytest

from csharp_normalizer.errors import NormalizerError, StructuralError, UnboundVariableError
from csharp_normalizer.transformer.state import State


def test_bind_and_read():
  st = State()
  assert st.set_var("x", [1, 2])
  assert st.get_var("x") == [1, 2]


def test_rebinding_must_be_equal():
  st = State()
  st.set_var("x", 1)
  assert st.set_var("x", 1)
  assert not st.set_var("x", 2)
  # kind-strict
  assert not st.set_var("x", True)
  assert st.get_var("x") == 1


def test_unbound_variable():
  with pytest.raises(UnboundVariableError) as exc:
    State().get_var("missing")
  assert exc.value.name == "missing"
  assert isinstance(exc.value, StructuralError)
  assert isinstance(exc.value, NormalizerError)


def test_clone_is_independent():
  st = State({"a": 1})
  sub = st.clone()
  sub.set_var("b", 2)
  with pytest.raises(UnboundVariableError):
    st.get_var("b")
  st.apply_from(sub)
  assert (st.get_var("a"), st.get_var("b")) == (1, 2)
