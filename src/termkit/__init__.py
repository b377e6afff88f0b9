"""termkit: resolve term references against versioned machine-readable glossaries."""

__version__ = "0.1.0"
