"""Upstream HTTP transport."""

from aiocatalogs.core.infrastructure.http.client import JsonHttpClient, JsonResponse

__all__ = ["JsonHttpClient", "JsonResponse"]
