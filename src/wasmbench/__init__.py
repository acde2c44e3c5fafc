"""wasmbench: repeated benchmark runner with per-phase running averages."""

__version__ = "0.1.0"
