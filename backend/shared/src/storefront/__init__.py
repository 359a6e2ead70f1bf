"""Storefront backend domain library: order models and payment reconciliation."""

__version__ = "0.1.0"
