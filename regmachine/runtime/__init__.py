"""
Runtime module: Program execution entry points.
"""

from regmachine.runtime.schedule import execute

__all__ = [
    "execute",
]
