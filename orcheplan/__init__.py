"""orcheplan - authorization and graph-consistency core for shared project workspaces."""

__version__ = "0.1.0"
