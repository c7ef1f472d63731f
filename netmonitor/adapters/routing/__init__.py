"""Routing-table adapters for finding the local gateway."""
