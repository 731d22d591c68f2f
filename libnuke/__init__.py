"""Filters, YAML configuration, resource reporting, property docs and errors for resource removal tools."""

__version__ = "0.1.0"
__all__ = ["config", "docs", "errors", "filter", "log"]