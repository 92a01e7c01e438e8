"""Configuration, security and shared dependencies."""
