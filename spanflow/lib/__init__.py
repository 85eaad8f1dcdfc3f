"""Library utilities for spanflow.

This package contains integration modules for external libraries.
"""

from spanflow.lib.nx import EdgeMap, ensure_integer_labels, from_networkx, to_networkx

__all__ = [
    "EdgeMap",
    "ensure_integer_labels",
    "from_networkx",
    "to_networkx",
]
