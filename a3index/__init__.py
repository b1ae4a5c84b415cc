"""Half-open geometry, an index table, adaptive and static KD-tree access paths, query types and seed derivation."""

__version__ = "0.1.0"