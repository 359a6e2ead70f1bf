"""REST API for the storefront backend (payment webhooks and order status)."""

__version__ = "0.1.0"
