"""Application layer: reconciliation engine and sync pipeline."""
