"""Brik Brik: an 8x8 block-packing puzzle engine with a session API."""

__version__ = "0.1.0"
