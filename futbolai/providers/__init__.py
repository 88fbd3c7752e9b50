"""Upstream data providers. Each module adapts one source to plain dicts."""

from .base import Confidence, JsonHttpClient, ProviderDescriptor, ProviderId, ProviderResult

__all__ = [
    "Confidence",
    "JsonHttpClient",
    "ProviderDescriptor",
    "ProviderId",
    "ProviderResult",
]
