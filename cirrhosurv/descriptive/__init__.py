"""
Descriptive statistics for the patient table
"""

from .summary import summarize_by_event, counts_by_event

__all__ = [
    "summarize_by_event",
    "counts_by_event"
]
