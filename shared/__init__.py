"""
Shared utilities for the registry submission service.

This package aggregates common building blocks:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation and secret redaction
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton (health, metrics, error handlers)
- test_helpers: Factories shared by the test suites

Do not import from service_* packages into shared/.
"""
