# app/shared/__init__.py
