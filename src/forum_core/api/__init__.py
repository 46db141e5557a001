"""HTTP orchestration layer composing the core services."""
