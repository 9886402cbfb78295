"""Core models and configuration."""
