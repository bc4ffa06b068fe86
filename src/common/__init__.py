"""Shared helpers: errors, logging, HTTP and settings."""
