"""Content loading, persistence and synchronization services."""
