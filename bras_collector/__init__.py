"""Session tracking, signalling parsing, record types, statistics and configuration for a BRAS traffic collector."""

__version__ = "1.0.0"