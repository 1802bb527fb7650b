"""Shop modules: read-only reporting built on the pure shop engines."""
