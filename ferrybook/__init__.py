"""
FerryBook - boat ticket booking service
"""

__version__ = "1.0.0"
