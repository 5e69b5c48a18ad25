"""
Shared utilities for the authorization engine and the services hosting it.

This package aggregates common building blocks:

- config: Engine and service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton (health, metrics, error handlers)

Do not import from fastapi_can or service_* packages into shared/.
"""
