"""
Intent classification components.

Runs sentence embeddings through a trained classification model to produce
a score per intent label.
"""
