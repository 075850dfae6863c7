"""mac-cleanup: scan and clean caches, logs, trash and build artifacts on macOS."""

__version__ = "0.3.0"
