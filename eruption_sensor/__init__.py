"""Forwards desktop focus changes to the Eruption daemon over a named pipe."""

__version__ = "0.1.0"
