"""Public package surface for statustree.

Exports ``main`` for programmatic CLI invocation.
The status-tree core lives under ``statustree.tree_model`` and ``statustree.runtime``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
