"""
Shared utilities for the HollyMarket Access Gateway.

This package aggregates the building blocks the gateway service is built on:

- config: Environment-driven settings via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: The error taxonomy and its status/code table
- responses: Success and error envelopes
- base_service: FastAPI app skeleton, middleware and terminal handlers

Do not import from service packages into shared/.
"""
