"""Dependency injection."""

from rare_sniper.DI.container import Container

__all__ = ["Container"]
