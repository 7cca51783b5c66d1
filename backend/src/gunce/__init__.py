"""
Günce Defteri

A personal diary backend: entries are written to a local embedded store,
optionally encrypted at rest, and reconciled with a hosted remote store.
"""

__version__ = "1.0.0"
__author__ = "Günce Defteri Development Team"
__description__ = "Personal diary with local/remote storage and entry encryption"
