"""Helpers shared by the API layer.

- **responses**: the orjson-backed default response class
"""
