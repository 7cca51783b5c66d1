"""
API routes for the Günce Defteri application.

Exports all route modules for easy importing.
"""

from . import auth, backup, entries, monitoring, sentiment, settings, stats, sync, tags

__all__ = [
    "auth",
    "backup",
    "entries",
    "monitoring",
    "sentiment",
    "settings",
    "stats",
    "sync",
    "tags",
]
