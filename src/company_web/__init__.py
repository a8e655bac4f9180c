"""HTTP surface for company autocomplete (Flask)."""
from .web import create_app, main

__all__ = ["create_app", "main"]
