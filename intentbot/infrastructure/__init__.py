"""
Infrastructure package for the intent bot.

This package contains the model stack (encoder, registry, classifier,
tagger) and the external weather integration.
"""
