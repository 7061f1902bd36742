"""
AI module for the intent bot.

This package contains the inference components:
- Sentence embeddings
- The model registry and artifact source
- Intent classification
- Token-level sequence tagging
"""
