"""
Pinch-zoom gesture engine and session API.
"""

__version__ = "0.3.0"
