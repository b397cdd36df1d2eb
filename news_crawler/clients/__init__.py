from .base import BaseApiClient, create_http_client
from .registry_client import SourceRegistryClient
from .ingest_client import IngestClient

__all__ = ["BaseApiClient", "create_http_client", "SourceRegistryClient", "IngestClient"]
