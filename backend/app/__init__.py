"""Support Bot API backend."""
