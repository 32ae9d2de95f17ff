"""Logging setup for the API."""

from __future__ import annotations

from hundred_days.observability.logging import CorrelationIdFilter, configure_logging

__all__ = ["CorrelationIdFilter", "configure_logging"]
