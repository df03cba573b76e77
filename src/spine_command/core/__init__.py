"""Core primitives: errors, hashing, serialization, logging, settings."""
