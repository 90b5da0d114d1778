"""Storefront domain layer."""
