"""Adapters around external tools."""
