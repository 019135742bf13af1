"""openvolume - file-backed local volume plugin."""

__version__ = "0.1.0"
