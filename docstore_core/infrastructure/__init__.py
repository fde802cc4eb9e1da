from .minio import MinioClientConnector, get_minio_client

__all__ = ["MinioClientConnector", "get_minio_client"]
