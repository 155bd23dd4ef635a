"""taskgraph: dependency-rule parsing, execution ordering and cycle reporting."""

__version__ = "0.1.0"
