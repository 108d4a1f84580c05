"""
Core utilities shared across the Blog API.

This package hosts:
- configuration helpers (env vars, paths, feature flags)
- logging setup shared by the app and the process entrypoint
- the access log middleware

Routers and services depend on these primitives instead of reading
os.environ or configuring handlers themselves.
"""
