"""Client API composing a session with the metadata, partner and apex services"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..core.async_poller import CancellationToken
from ..core.session import SessionGateway
from ..models.config import ClientConfig, Credentials
from ..models.manifest import Manifest
from ..services.apex_service import ApexService
from ..services.config_service import ConfigService
from ..services.deploy_service import DeploymentOrchestrator
from ..services.metadata_service import MetadataService, parse_query
from ..services.partner_service import PartnerService
from ..services.retrieve_service import RetrievalOrchestrator
from ..services.tooling_service import ToolingService
from ..transport.base import Transport
from ..transport.soap import SoapTransport
from ..utils.zip_utils import UnzipCallback, make_zip, unzip

logger = logging.getLogger(__name__)

ManifestLike = Union[Manifest, Mapping[str, Iterable[str]]]


class SFDCClient:
    """Client for one org

    Every client owns its own session, so several clients (for several
    orgs or users) can be used side by side::

        with SFDCClient(Credentials("me@example.com", "pass+token")) as client:
            client.retrieve_to_dir({"ApexClass": ["*"]}, "src")
    """

    def __init__(self,
                 config: Union[ClientConfig, Credentials],
                 transport: Optional[Transport] = None,
                 sleep: Optional[Callable[[float], Any]] = None):
        """
        Initialize client

        Args:
            config: Client configuration, or bare credentials
            transport: Transport for remote calls (defaults to SOAP over httpx)
            sleep: Sleep function used while polling (for testing)
        """
        if isinstance(config, Credentials):
            config = ClientConfig(credentials=config)
        self.config = config

        self.transport = transport or SoapTransport({'timeout': config.timeout})
        self.gateway = SessionGateway(
            config.credentials,
            self.transport,
            session_fault_codes=config.session_fault_codes,
        )

        self.retriever = RetrievalOrchestrator(
            self.gateway,
            polling=config.polling,
            api_version=config.api_version,
            sleep=sleep,
        )
        self.deployer = DeploymentOrchestrator(self.gateway, polling=config.polling, sleep=sleep)
        self.metadata = MetadataService(self.gateway, api_version=config.api_version)
        self.partner = PartnerService(
            self.gateway,
            poll_interval=config.polling.query_interval,
            sleep=sleep or time.sleep,
        )
        self.apex = ApexService(self.gateway)
        self.tooling = ToolingService(self.gateway)

    @classmethod
    def from_config_file(cls,
                         config_path: Optional[Union[str, Path]] = None,
                         **kwargs) -> 'SFDCClient':
        """Create a client from a YAML configuration file"""
        return cls(ConfigService(config_path).load_config(), **kwargs)

    def new_manifest(self, is_deletion: bool = False) -> Manifest:
        """Empty manifest using this client's API version and source root"""
        return Manifest(
            is_deletion=is_deletion,
            api_version=self.config.api_version,
            src_dir=self.config.src_dir,
        )

    def retrieve(self,
                 manifest: ManifestLike,
                 cancel_token: Optional[CancellationToken] = None) -> str:
        """
        Retrieve metadata

        Args:
            manifest: What to retrieve
            cancel_token: Optional cancellation token

        Returns:
            Base64-encoded zip archive
        """
        return self.retriever.retrieve(manifest, cancel_token)

    def retrieve_to_dir(self,
                        manifest: ManifestLike,
                        dest: Union[str, Path],
                        callback: Optional[UnzipCallback] = None,
                        cancel_token: Optional[CancellationToken] = None) -> str:
        """Retrieve metadata and extract it into ``dest``"""
        return unzip(dest, self.retrieve(manifest, cancel_token), callback)

    def deploy(self,
               zip_file: str,
               deploy_options: Optional[Dict[str, Any]] = None,
               cancel_token: Optional[CancellationToken] = None) -> str:
        """
        Deploy a base64 archive

        Returns:
            The deployment id
        """
        return self.deployer.deploy(zip_file, deploy_options, cancel_token)

    def deploy_from_manifest(self,
                             manifest: ManifestLike,
                             base_dir: Optional[Union[str, Path]] = None,
                             deploy_options: Optional[Dict[str, Any]] = None,
                             cancel_token: Optional[CancellationToken] = None) -> str:
        """
        Zip the files behind a manifest and deploy them

        The manifest goes into the archive as package.xml; nothing is
        written under ``base_dir``.

        Args:
            manifest: What to deploy
            base_dir: Source root holding the files (defaults to the
                configured src_dir)
            deploy_options: Passed verbatim as DeployOptions
            cancel_token: Optional cancellation token

        Returns:
            The deployment id
        """
        if not isinstance(manifest, Manifest):
            manifest = self.new_manifest().add(manifest)

        base_dir = Path(base_dir or self.config.src_dir)
        archive = make_zip(
            base_dir,
            manifest.to_archive_file_list(),
            extra={"package.xml": manifest.to_xml()},
        )
        return self.deploy(archive, deploy_options, cancel_token)

    def deploy_recent_validation(self, validation_id: str) -> str:
        """Promote a validated deployment; returns the new deployment id"""
        return self.deployer.deploy_recent_validation(validation_id)

    def list_metadata(self, *queries: Union[str, Dict[str, Any]]) -> List[str]:
        """List file names on the server

        Queries may be dicts or ``Type[:Folder]`` strings.
        """
        return self.metadata.list_metadata(*[
            parse_query(query) if isinstance(query, str) else query
            for query in queries
        ])

    def list_manifest(self, *queries: Union[str, Dict[str, Any]]) -> Manifest:
        """List metadata on the server as a manifest"""
        return self.new_manifest().add_from_paths(self.list_metadata(*queries))

    def query(self, soql: str, include_deleted: bool = False) -> List[Dict[str, Any]]:
        """Run a SOQL query and return every record"""
        if include_deleted:
            return self.partner.query_all(soql)
        return self.partner.query(soql)

    def execute_anonymous(self,
                          code: str,
                          debug: bool = False,
                          tooling: bool = False) -> Tuple[Dict[str, Any], Optional[str]]:
        """Execute anonymous Apex; returns (result, debug_log)

        With ``tooling`` the code runs through the tooling API, which
        cannot return a debug log.
        """
        if tooling:
            if debug:
                raise ValueError("The tooling API cannot return a debug log")
            return self.tooling.execute_anonymous(code), None
        return self.apex.execute_anonymous(code, debug)

    def close(self) -> None:
        """Close the transport"""
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def retrieve(manifest: ManifestLike,
             dest: Optional[Union[str, Path]] = None,
             config_path: Optional[Union[str, Path]] = None) -> str:
    """
    Retrieve metadata

    This is a convenience function that loads the configuration file,
    creates an SFDCClient and performs the retrieval.

    Args:
        manifest: What to retrieve
        dest: Extract into this directory; when omitted the base64
            archive is returned instead
        config_path: Configuration file

    Returns:
        "Success" when extracted, otherwise the base64 archive
    """
    with SFDCClient.from_config_file(config_path) as client:
        if dest is None:
            return client.retrieve(manifest)
        return client.retrieve_to_dir(manifest, dest)


def deploy(manifest: ManifestLike,
           base_dir: Optional[Union[str, Path]] = None,
           config_path: Optional[Union[str, Path]] = None,
           **deploy_options) -> str:
    """
    Deploy the files behind a manifest

    This is a convenience function that loads the configuration file,
    creates an SFDCClient and performs the deployment.

    Args:
        manifest: What to deploy
        base_dir: Source root
        config_path: Configuration file
        **deploy_options: DeployOptions, e.g. ``checkOnly=True``

    Returns:
        The deployment id
    """
    with SFDCClient.from_config_file(config_path) as client:
        return client.deploy_from_manifest(manifest, base_dir, deploy_options or None)
