"""FastAPI presentation layer for the storefront sessions API."""
