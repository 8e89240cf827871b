"""Application layer: provider ports, adapters, and services."""
