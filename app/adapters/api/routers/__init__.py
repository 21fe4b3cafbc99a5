# app/adapters/api/routers/__init__.py
"""
API Route Definitions.

This package contains the route handlers (controllers) organized by area.
- `render`: AST -> English text plus derivations, and derivation diffs.
- `determiners`: Option availability and commits for determiner slots.
- `health`: System health checks.
"""

from . import determiners
from . import health
from . import render

__all__ = [
    "determiners",
    "health",
    "render",
]
