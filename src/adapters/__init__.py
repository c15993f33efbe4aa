"""Adapters exposing the use cases to users (CLIs and interfaces)."""
