"""Document storage: store, blob backends and factory."""
