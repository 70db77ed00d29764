"""Metadata listing service"""

import logging
from typing import Any, Dict, List, Optional

from ..constants import LIST_METADATA_CHUNK_SIZE
from ..core.session import ApiEndpoint, SessionGateway
from ..models.manifest import Manifest

logger = logging.getLogger(__name__)


def parse_query(spec: str) -> Dict[str, str]:
    """Turn ``Report:FooReports`` into ``{"type": "Report", "folder": "FooReports"}``"""
    type_name, _, folder = spec.partition(":")
    query = {"type": type_name.strip()}
    if folder.strip():
        query["folder"] = folder.strip()
    return query


class MetadataService:
    """Lists metadata on the server"""

    def __init__(self,
                 gateway: SessionGateway,
                 api_version: Optional[str] = None,
                 chunk_size: int = LIST_METADATA_CHUNK_SIZE):
        """Initialize metadata service

        Args:
            gateway: Session gateway used for every call
            api_version: Sent as asOfVersion when set
            chunk_size: Queries per listMetadata call
        """
        self.gateway = gateway
        self.api_version = api_version
        self.chunk_size = chunk_size

    def list_metadata(self, *queries: Dict[str, Any]) -> List[str]:
        """List file names for a set of type/folder queries

        Accepts queries such as::

            {"type": "CustomObject"}
            {"type": "Report", "folder": "FooReports"}

        Returns:
            File names, e.g. ``objects/Account.object``
        """
        logger.info("Listing Metadata...")

        file_names: List[str] = []
        # The server only accepts a few queries per call
        for offset in range(0, len(queries), self.chunk_size):
            chunk = queries[offset:offset + self.chunk_size]
            parameters = [("queries", query) for query in chunk]
            if self.api_version:
                parameters.append(("asOfVersion", self.api_version))

            logger.debug("listMetadata chunk %s", chunk)
            result = self.gateway.invoke("listMetadata", parameters, api=ApiEndpoint.METADATA)
            for item in result.results():
                if isinstance(item, dict) and item.get("fileName"):
                    file_names.append(item["fileName"])

        return file_names

    def list_manifest(self,
                      *queries: Dict[str, Any],
                      manifest: Optional[Manifest] = None) -> Manifest:
        """List metadata and collect the results into a manifest"""
        manifest = manifest if manifest is not None else Manifest()
        return manifest.add_from_paths(self.list_metadata(*queries))
