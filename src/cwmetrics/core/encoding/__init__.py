"""Encoders for assembled events."""
