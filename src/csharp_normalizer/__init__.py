"""
csharp-normalizer Package.

Normalizes native C# syntax trees (Roslyn trees serialized as JSON) into a
canonical, language-neutral tree: positions are made uniform, trivia is
hoisted into groups, well known constructs become ``uast:*`` nodes, and
nodes are tagged with semantic roles.

Usage
-----

Simple Normalization
^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import csharp_normalizer as csn
    tree = {"@type": "TrueLiteralExpression", ...}
    print(csn.normalize(tree))

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from csharp_normalizer import Mode, NormalizerEngine, RuntimeConfig

    engine = NormalizerEngine(config=RuntimeConfig(mode=Mode.PREPROCESSED))
    res = engine.run(tree, source=code)

    if res.success:
        print(res.uast)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import Optional, Union

from csharp_normalizer.config import RuntimeConfig
from csharp_normalizer.core.conversion_result import ConversionResult
from csharp_normalizer.core.engine import NormalizerEngine
from csharp_normalizer.enums import Mode, Role
from csharp_normalizer.errors import NormalizerError
from csharp_normalizer.uast.nodes import Node

__version__ = "0.1.0"


def normalize(
  tree: Node,
  source: Optional[str] = None,
  mode: Union[Mode, str, None] = None,
  config: Optional[RuntimeConfig] = None,
) -> Node:
  """
  Normalizes one native tree.

  This is a convenience wrapper around :class:`NormalizerEngine`.

  Args:
      tree: The native tree, as decoded from JSON.
      source: The source text the tree was parsed from. Enables line and
          column numbers and comment tokens.
      mode: How far to transform. Defaults to the configured mode.
      config: Runtime configuration. Defaults to built-in settings.

  Returns:
      The normalized tree.

  Raises:
      NormalizerError: If the input is malformed or a mapping failed.
  """
  engine = NormalizerEngine(config=config)
  result = engine.run(tree, source=source, mode=Mode(mode) if mode is not None else None)

  if not result.success:
    error_msg = "\n".join(result.errors)
    raise NormalizerError(f"Normalization failed:\n{error_msg}")

  return result.uast


__all__ = [
  "ConversionResult",
  "Mode",
  "NormalizerEngine",
  "NormalizerError",
  "Role",
  "RuntimeConfig",
  "normalize",
  "__version__",
]
