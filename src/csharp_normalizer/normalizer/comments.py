"""
Comment text splitting.

A raw comment token such as ``"//  hello "`` is split into its decoration and
its text: the prefix whitespace after the start token, the text itself, the
suffix whitespace before the end token, and the indentation (tab) shared by
continuation lines of a multi-line comment. Joining the parts back yields the
original token exactly.
"""

from typing import List, NamedTuple, Optional

from csharp_normalizer.errors import UnexpectedTypeError
from csharp_normalizer.transformer.objects import Fields, Obj
from csharp_normalizer.transformer.ops import Bool, Op, Var
from csharp_normalizer.transformer.state import State
from csharp_normalizer.uast.nodes import Node, NodeKind, kind_of


class CommentParts(NamedTuple):
  text: str
  prefix: str
  suffix: str
  tab: str


def _leading_space(line: str) -> str:
  return line[: len(line) - len(line.lstrip())]


def _common_prefix(values: List[str]) -> str:
  if not values:
    return ""
  first, last = min(values), max(values)
  size = 0
  while size < len(first) and first[size] == last[size]:
    size += 1
  return first[:size]


def split_comment(token: str, start: str, end: str) -> Optional[CommentParts]:
  """
  Splits a comment token into its parts.

  Args:
      token: Raw comment text including its delimiters.
      start: Opening delimiter (``//``, ``/*``).
      end: Closing delimiter, empty for line comments.

  Returns:
      CommentParts, or None if ``token`` does not have the given delimiters.
  """
  if not token.startswith(start) or not token.endswith(end) or len(token) < len(start) + len(end):
    return None
  body = token[len(start) : len(token) - len(end)]

  stripped = body.lstrip()
  if not stripped:
    return CommentParts(text="", prefix=body, suffix="", tab="")
  prefix = body[: len(body) - len(stripped)]
  text = stripped.rstrip()
  suffix = stripped[len(text) :]

  lines = text.split("\n")
  if len(lines) == 1:
    return CommentParts(text=text, prefix=prefix, suffix=suffix, tab="")
  tab = _common_prefix([_leading_space(line) for line in lines[1:]])
  if tab:
    lines = lines[:1] + [line[len(tab) :] for line in lines[1:]]
  return CommentParts(text="\n".join(lines), prefix=prefix, suffix=suffix, tab=tab)


def join_comment(parts: CommentParts, start: str, end: str) -> str:
  """Inverse of :func:`split_comment`."""
  text = parts.text
  if parts.tab:
    text = text.replace("\n", "\n" + parts.tab)
  return start + parts.prefix + text + parts.suffix + end


class CommentText(Op):
  """
  Matches a comment token string and binds its parts.

  ``var`` receives the text, ``var + "_pref"``, ``var + "_suf"`` and
  ``var + "_tab"`` the decoration. Construction joins them back.
  """

  kinds = NodeKind.STRING

  def __init__(self, start: str, end: str, var: str) -> None:
    self.start = start
    self.end = end
    self.var = var

  def _names(self):
    return self.var, self.var + "_pref", self.var + "_suf", self.var + "_tab"

  def check(self, st: State, n: Node) -> bool:
    parts = split_comment(n, self.start, self.end)
    if parts is None:
      return False
    return all(st.set_var(name, value) for name, value in zip(self._names(), parts))

  def construct(self, st: State, n: Node) -> Node:
    values = []
    for name in self._names():
      value = st.get_var(name)
      if not isinstance(value, str):
        raise UnexpectedTypeError("string", kind_of(value).name.lower(), f"comment part {name!r}")
      values.append(value)
    return join_comment(CommentParts(*values), self.start, self.end)


def CommentNode(block: bool, var: str) -> Fields:
  """
  Builds the fields of a ``uast:Comment`` from the parts bound by
  :class:`CommentText`. The type tag is added by the enclosing mapping.
  """
  return Obj(
    {
      "Block": Bool(block),
      "Text": Var(var),
      "Prefix": Var(var + "_pref"),
      "Suffix": Var(var + "_suf"),
      "Tab": Var(var + "_tab"),
    }
  )
