"""
Persistence adapters.

These modules encapsulate how collections are stored/retrieved (JSON files on
disk, or process memory seeded from those files). Services depend on the
CollectionStore interface rather than touching the JSON files.
"""
