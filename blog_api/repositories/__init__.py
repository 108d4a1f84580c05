"""
Persistence adapters.

These modules encapsulate how state reaches the disk (today a single JSON
snapshot). Services depend on the adapter instead of touching the file.
"""
