"""
Sequence tagging components used for slot extraction.
"""
