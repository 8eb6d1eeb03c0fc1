"""
Adapters module - I/O surfaces.

Adapters are thin wrappers over SignSession and the library stores.
They hold no matching or sequencing logic, only I/O.
"""

from signboard.adapters.console import ConsoleRenderer

__all__ = [
    "ConsoleRenderer",
]
