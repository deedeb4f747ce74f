"""Flask frontend for the typo checker (JSON API + single-page UI)."""
from __future__ import annotations
from .web import app, main

__all__ = ["app", "main"]
