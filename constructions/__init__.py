"""Phrase and clause assembly on top of the morphology layer."""
