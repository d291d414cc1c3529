"""
Resolution Package

- ResolutionEngine: layer merge with a short TTL cache
- OverrideIndex: per-call lookup of additions and overrides
- MutationGateway: authority-checked writes
"""

from standards_hub.resolution.engine import ResolutionEngine
from standards_hub.resolution.gateway import MutationGateway
from standards_hub.resolution.index import OverrideIndex

__all__ = [
    "ResolutionEngine",
    "MutationGateway",
    "OverrideIndex",
]
