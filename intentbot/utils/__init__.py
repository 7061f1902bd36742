"""
Shared utilities: structured logging and the application exception hierarchy.
"""
