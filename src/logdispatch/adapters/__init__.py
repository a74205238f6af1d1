"""Adapters connecting the core to concrete sinks and to stdlib logging."""
