"""Skeletor — scaffold directory trees from YAML and snapshot them back.

The package is organised around a bidirectional tree engine:
- ``skeletor.models``: the in-memory tree and run results
- ``skeletor.engine``: planning and applying a tree onto a filesystem
- ``skeletor.snapshot``: walking a real directory back into a tree
- ``skeletor.reporting``: the event sink used by both directions
"""

__version__ = "1.4.0"

DEFAULT_CONFIG_FILE = ".skeletorrc"
