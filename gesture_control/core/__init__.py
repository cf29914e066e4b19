"""Core types, event bus and per-frame pipeline."""
