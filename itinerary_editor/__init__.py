"""
Itinerary editor engine.

Loads a travel itinerary, applies validated edits to it in memory and keeps
the remote copy in sync through immediate and debounced whole-document saves.
"""

__version__ = "0.1.0"
