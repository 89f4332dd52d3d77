"""
Shared utilities for the retail profile automation project.

This package is intentionally small and focused. It currently provides:

- `shared.config` for environment-based configuration
- `shared.logging` for structlog-based structured logging
- `shared.errors` for the automation exception hierarchy

The API, the CLI and the automation layer should treat `shared/` as
read-only infrastructure code and avoid introducing service-specific
coupling here.
"""
