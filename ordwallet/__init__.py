"""Bitcoin primitives, transaction-building errors, in-memory chain state and small display helpers."""

__version__ = "0.1.0"