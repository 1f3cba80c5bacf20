"""
taskhours - employee task tracking with business-calendar elapsed hours.
"""

__version__ = "0.1.0"
