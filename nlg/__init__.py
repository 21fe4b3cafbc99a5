"""
nlg
===

Rendering entry points (`nlg.api`), the derivation tracker
(`nlg.derivation`) and the command-line frontend.
"""
