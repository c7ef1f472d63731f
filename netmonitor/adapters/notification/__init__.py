"""Incident sink adapters.

Implementations support the two output channels of an incident:
- Append-only log file (persistent record)
- Stdout (operator console mirror)
"""
