"""
FinDash - Source Package

The aggregation, recurrence-projection and reconciliation engine behind a
personal/household finance dashboard.

DESIGN PRINCIPLES:
1. Reports are pure functions of a snapshot and a reference date
2. One owner's data never leaks into another's
3. Local changes roll back when the durable write fails
4. Failures carry a kind, not a message to parse
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "FinDash Team"
