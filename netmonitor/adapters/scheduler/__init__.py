"""Scheduler adapters for driving the sampling and evaluation loops."""
