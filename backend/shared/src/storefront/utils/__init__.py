"""Shared utilities for the storefront backend."""
