"""
Standards Hub

Curriculum standards resolution: national baseline, state crosswalk,
district additions and school overrides merged into one provenance-tagged
result set, plus the gateway that writes the mutable layers.
"""

__version__ = "0.1.0"
