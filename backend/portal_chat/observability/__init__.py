"""Observability module for metrics."""
