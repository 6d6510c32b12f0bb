"""Prometheus exporter for AWS ECS clusters."""

__version__ = "0.3.0"
