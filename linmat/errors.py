"""
Error taxonomy.

- Malformed values (dimensions, data length, non-integral indices, zero slice
  steps, casting a non-vector to a Vec) raise the built-in ValueError.
- Indices outside the bounds of their axis raise the built-in IndexError.
- Operations called on a shape they do not support raise ShapeError.
"""


class ShapeError(TypeError):
    """A matrix operation was invoked on a shape it does not support."""


__all__ = ["ShapeError"]
