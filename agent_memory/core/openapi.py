"""OpenAPI metadata and customization utilities.

Provides a helper to enrich the generated OpenAPI schema with:
- Tags metadata
- The optional ``X-Session-ID`` header documented as the rate limit identity
- A documented 429 response on rate-limited operations

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_TAGS = [
    {"name": "Memories", "description": "Store, list, search and delete agent memories."},
    {"name": "Chat", "description": "Memory-augmented agent replies."},
    {"name": "Breeding", "description": "Trait mixing for bred agents."},
    {"name": "Health", "description": "Liveness and rate limiter statistics."},
]

_RATE_LIMITED_TAGS = {"Memories", "Chat"}

_TOO_MANY_REQUESTS = {
    "description": "Rate limit exceeded for this caller.",
    "content": {
        "application/json": {
            "example": {
                "error": "I'm getting too many requests right now. Please try again in a moment!",
                "success": False,
                "rateLimit": {
                    "limit": 10,
                    "remaining": 0,
                    "resetTime": 1700000060000,
                    "retryAfter": 42,
                },
            }
        }
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and rate limit docs.

    - Adds tags metadata if not present
    - Adds a 429 response to every operation of a rate-limited tag
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        # Tags metadata
        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in _TAGS:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for methods in paths.values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                if _RATE_LIMITED_TAGS.intersection(method_obj.get("tags", [])):
                    method_obj.setdefault("responses", {}).setdefault("429", _TOO_MANY_REQUESTS)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
