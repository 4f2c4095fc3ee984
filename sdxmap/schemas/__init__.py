"""Packaged JSON schemas for snapshots and configuration files."""
