"""Core wiring."""
