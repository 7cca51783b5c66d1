"""Core infrastructure: configuration, logging, errors, crypto and security."""
