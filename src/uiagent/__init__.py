"""Constrained UI generation: plans, change plans, validators and code generation."""

__version__ = "0.1.0"
