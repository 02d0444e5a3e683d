"""brandbridge: live Universal Login branding editor bridge."""

__version__ = "0.1.0"
