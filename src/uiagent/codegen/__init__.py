from .generator import generate_code, json_literal

__all__ = ["generate_code", "json_literal"]
