"""
Core utilities shared across the Artisanverse API.

This package hosts:
- configuration helpers (env vars, data directory, paging limits)
- cross-cutting services such as logging setup, rate limit helpers and the
  response envelope used by every router.

Routers/services should depend on core primitives instead of reading
os.environ directly.
"""
