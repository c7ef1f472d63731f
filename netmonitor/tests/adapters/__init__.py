"""Integration tests for adapter implementations.

These tests verify adapters against patched subprocesses, libraries,
and real temporary files.
"""
