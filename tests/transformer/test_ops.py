"""
Tests for the core pattern operators.

Verifies both directions (check and construct) of Var, Is, Any, Arr,
Append, Check and Cases.
"""

import pytest

from csharp_normalizer.errors import AmbiguousValueError, StructuralError, UnboundVariableError, UnexpectedTypeError
from csharp_normalizer.transformer.ops import Any, Append, Arr, Bool, Cases, Check, Int, Is, String, Var, check_op
from csharp_normalizer.transformer.predicates import In
from csharp_normalizer.transformer.state import State


def test_var_same_name_must_agree():
  op = Arr(Var("x"), Var("x"))
  assert check_op(op, State(), [1, 1])
  assert not check_op(op, State(), [1, 2])


def test_is_is_kind_strict():
  assert check_op(Int(1), State(), 1)
  assert not check_op(Int(1), State(), True)
  assert not check_op(Bool(True), State(), 1)
  assert String("a").construct(State(), None) == "a"


def test_is_matches_structures():
  assert check_op(Is({"a": [1]}), State(), {"a": [1]})
  assert not check_op(Is({"a": [1]}), State(), {"a": [1], "b": 2})


def test_any_cannot_construct():
  assert check_op(Any(), State(), {"whatever": 1})
  with pytest.raises(AmbiguousValueError):
    Any().construct(State(), None)


def test_predicates_cannot_construct():
  with pytest.raises(AmbiguousValueError):
    In(1, 2).construct(State(), None)


def test_kind_precheck_skips_op():
  # Arr would fail on len() of an object without the pre-check
  assert not check_op(Arr(), State(), {"@type": "A"})
  assert not check_op(Arr(Var("x")), State(), "x")


def test_arr_exact_length():
  st = State()
  assert check_op(Arr(Var("a"), Var("b")), st, [1, 2])
  assert Arr(Var("b"), Var("a")).construct(st, None) == [2, 1]
  assert not check_op(Arr(Var("a")), State(), [1, 2])


def test_append_splits_tail():
  op = Append(Var("head"), Arr(Var("last")))
  st = State()
  assert check_op(op, st, [1, 2, 3])
  assert st.get_var("head") == [1, 2]
  assert st.get_var("last") == 3
  assert op.construct(st, None) == [1, 2, 3]
  assert not check_op(op, State(), [])


def test_append_prefix_must_be_array():
  st = State({"head": "x", "last": 1})
  with pytest.raises(UnexpectedTypeError):
    Append(Var("head"), Arr(Var("last"))).construct(st, None)


def test_check_guard_does_not_bind():
  st = State()
  assert check_op(Check(Var("guard"), Var("x")), st, 5)
  with pytest.raises(UnboundVariableError):
    st.get_var("guard")
  assert st.get_var("x") == 5


def test_check_guard_rejects():
  assert not check_op(Check(In("a", "b"), Var("x")), State(), "c")


def test_cases_binds_index():
  op = Cases("c", Is("a"), Var("v"))
  st = State()
  assert check_op(op, st, "b")
  assert st.get_var("c") == 1
  assert st.get_var("v") == "b"
  assert op.construct(st, None) == "b"

  st = State()
  assert check_op(op, st, "a")
  assert st.get_var("c") == 0
  with pytest.raises(UnboundVariableError):
    st.get_var("v")
  assert op.construct(st, None) == "a"


def test_cases_failed_branch_leaves_no_bindings():
  op = Cases("c", Arr(Var("x"), Is(0)), Arr(Var("y"), Var("z")))
  st = State()
  assert check_op(op, st, [1, 2])
  with pytest.raises(UnboundVariableError):
    st.get_var("x")
  assert st.get_var("c") == 1


def test_cases_index_must_be_valid_int():
  op = Cases("c", Is("a"), Is("b"))
  with pytest.raises(UnexpectedTypeError):
    op.construct(State({"c": "0"}), None)
  with pytest.raises(UnexpectedTypeError):
    op.construct(State({"c": True}), None)
  with pytest.raises(StructuralError):
    op.construct(State({"c": 5}), None)
