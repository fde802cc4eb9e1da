"""Shared core for docstore: configuration, logging, runtime errors and domain model."""
