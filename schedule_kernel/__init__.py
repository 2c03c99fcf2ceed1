"""
Schedule Kernel - pure value layer

A small algebra for ordered ranges and recurring calendar events:
- Generic intervals with open, closed and unbounded endpoints
- Piecewise interval maps with last-write-wins insertion
- Composable date specifications (recurrence predicates)
- Business calendars built from weekend sets and holiday specifications
- Exact ratios with explicit rounding policies
"""

__version__ = "0.1.0"
