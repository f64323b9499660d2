"""kgviz: interactive knowledge-graph layout and view engine."""

__version__ = "0.1.0"
