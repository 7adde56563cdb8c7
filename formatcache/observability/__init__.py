"""Observability: structured logging and metrics.

Provides standardized observability primitives using structlog for logging
and Prometheus for cache metrics.
"""
