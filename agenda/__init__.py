"""
Agenda - local event calendar backend
"""

__version__ = "1.0.0"
