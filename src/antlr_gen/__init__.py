"""Incremental ANTLR code generation driven by embedded timestamp markers."""

__version__ = "0.1.0"
