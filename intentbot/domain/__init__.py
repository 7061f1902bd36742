"""
Domain layer package for the intent bot.

This package contains the domain models, interfaces and services that define
how a conversational turn is classified and answered.
"""
