"""AI script Language Server.

This package provides a pygls-based Language Server exposing the aiscript
editor core: completion, brace highlighting, formatting, semantic tokens and
hover.

Note: The server keeps only the latest text of each open document; every
request is answered from that text alone.
"""

__all__ = [
    "server",
]
