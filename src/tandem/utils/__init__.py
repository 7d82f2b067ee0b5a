"""Shared utilities: configuration and console output."""
