"""Shared helpers for encoding, hashing, and JSONL persistence."""
