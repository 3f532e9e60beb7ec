"""
Lambda handlers package for AWS Lambda functions.
"""
from .analysis import handler as analysis_handler
from .cycles import handler as cycles_handler
from .entries import handler as entries_handler

__all__ = ["analysis_handler", "cycles_handler", "entries_handler"]
