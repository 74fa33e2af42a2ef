# Study planner - core library
"""
Local study timetable: study blocks, overlap validation, subject colors
and per-subject time statistics.
"""

__version__ = "0.1.0"
