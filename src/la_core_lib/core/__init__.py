"""Core algorithms of the case progress engine."""
