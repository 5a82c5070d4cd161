"""Core infrastructure: settings, security, errors, logging."""
