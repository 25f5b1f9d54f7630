"""attachflow - per-record document attachment pipeline."""

__version__ = "0.1.0"
