"""
scopegraft

Hosts a FastAPI application on top of an externally owned dependency container
by grafting the host's services onto it as a child scope.
"""

__version__ = "0.1.0"
