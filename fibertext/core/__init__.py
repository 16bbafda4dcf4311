"""Core editing engine: document model, services and the session boundary."""
