"""Core configuration, exceptions, logging and types for OmniVault."""
