"""Storefront - session and authentication backend for the e-commerce API."""
