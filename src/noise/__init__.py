"""NOISE: a shared real-time collaborative board for audio and text items."""

__version__ = "1.0.0"
