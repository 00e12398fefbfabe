"""
pastebox - ephemeral file paste and upload service.
"""

__version__ = "0.1.0"
