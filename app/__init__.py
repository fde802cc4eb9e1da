"""Application layer for docstore."""
