# app/adapters/api/__init__.py
"""
REST API Adapter.

This package is the HTTP entry point for Grammar Lens.
It is built on FastAPI:
- It depends on the core (use cases & models) and the engines.
- It wires the `app.shared.container` to inject dependencies.
- It does NOT contain grammar logic.
"""

# NOTE: We do NOT import create_app here to avoid circular imports
# when the DI container scans this package.
