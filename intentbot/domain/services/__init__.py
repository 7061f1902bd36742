"""
Domain Services Package.

This package contains the services that answer a conversational turn:
slot extraction, the per-intent handler table, the dispatcher applying the
confidence threshold, and the conversation session orchestrating a turn.
"""
