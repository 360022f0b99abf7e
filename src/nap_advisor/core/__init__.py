"""Core configuration and request guards."""
