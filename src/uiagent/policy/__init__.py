"""Policy catalog consulted by every validator and generator."""

from .catalog import DEFAULT_CATALOG, DisallowedPattern, PolicyCatalog

__all__ = ["DEFAULT_CATALOG", "DisallowedPattern", "PolicyCatalog"]
