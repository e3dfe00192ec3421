from .normalize import handle_normalize
from .serve import handle_request, handle_serve

__all__ = [
  "handle_normalize",
  "handle_request",
  "handle_serve",
]
