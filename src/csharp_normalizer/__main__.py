"""
Entry point for module execution (``python -m csharp_normalizer``).
"""

import sys

from csharp_normalizer.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
