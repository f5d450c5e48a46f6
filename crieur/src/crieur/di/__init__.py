"""Dependency injection."""

from crieur.di.container import Container

__all__ = ["Container"]
