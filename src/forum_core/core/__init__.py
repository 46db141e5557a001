"""Configuration, error types and security primitives."""
