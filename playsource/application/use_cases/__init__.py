"""Application use cases - orchestrate plugin operations."""

from .resolve_media import ResolveMediaUseCase

__all__ = [
    "ResolveMediaUseCase",
]
