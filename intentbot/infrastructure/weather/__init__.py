"""
Weather lookup integration.
"""
