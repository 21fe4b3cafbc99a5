"""Compact notation for sentence ASTs."""
