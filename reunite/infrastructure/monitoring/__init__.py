"""Prometheus metrics for the verification workflow."""
