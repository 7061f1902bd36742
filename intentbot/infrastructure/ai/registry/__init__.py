"""
Model registry and artifact source.
"""
