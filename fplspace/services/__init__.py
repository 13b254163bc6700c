"""
Stateful services built on top of the FPL client.
"""

from .store import FPLStore, LoadStatus

__all__ = ["FPLStore", "LoadStatus"]
