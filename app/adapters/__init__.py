# app/adapters/__init__.py
