"""
MinIO client connector for docstore.

Clients are cached per (endpoint, access key, secure, region) so every store
built from the same configuration shares one connection pool.
"""

from __future__ import annotations

from loguru import logger
from minio import Minio

from docstore_core.config import DocumentStoreConfig


class MinioClientConnector:
    """
    Cached connector for MinIO object storage.

    Usage:
        client = MinioClientConnector.get_instance(config)
        client.put_object(bucket_name="documents", ...)
    """

    _instances: dict[tuple, Minio] = {}

    @classmethod
    def get_instance(cls, config: DocumentStoreConfig) -> Minio:
        """
        Get or create the MinIO client for a configuration.

        Args:
            config: Store configuration carrying endpoint and credentials.

        Returns:
            Minio: The MinIO client instance.
        """
        key = (config.endpoint, config.access_key, config.secret_key, config.secure, config.region)
        client = cls._instances.get(key)
        if client is None:
            try:
                client = Minio(
                    endpoint=config.endpoint,
                    access_key=config.access_key,
                    secret_key=config.secret_key,
                    secure=config.secure,
                    region=config.region,
                )
                logger.info(f"Connected to MinIO at '{config.endpoint}'")
            except Exception as e:
                logger.error(f"Failed to connect to MinIO at '{config.endpoint}': {e}")
                raise
            cls._instances[key] = client

        return client

    @classmethod
    def reset(cls) -> None:
        """Drop cached clients."""
        cls._instances.clear()


def get_minio_client(config: DocumentStoreConfig) -> Minio:
    """
    Convenience function to get the MinIO client.

    Returns:
        Minio: The MinIO client instance.
    """
    return MinioClientConnector.get_instance(config)
