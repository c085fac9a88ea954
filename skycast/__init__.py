"""
skycast - current weather as terminal art.
"""

__version__ = "1.0.0"
