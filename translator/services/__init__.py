"""Service layer: rate limiting, caching, engines and the translate flow."""
