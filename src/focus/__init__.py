"""Focus operations: seed selection, closure, eviction and the scoped install."""
