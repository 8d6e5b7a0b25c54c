"""Content service for the clinic website and its admin panel."""
