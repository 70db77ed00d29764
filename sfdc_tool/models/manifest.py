# sfdc_tool/models/manifest.py
"""Manifest model"""

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..api.exceptions import PathError
from ..constants import DEFAULT_API_VERSION, DEFAULT_SRC_DIR, META_FILE_SUFFIX
from ..core.manifest_engine import ManifestEngine
from ..core.path_translator import PathTranslator
from ..core.type_registry import ArtifactType, TypeRegistry, DEFAULT_REGISTRY

logger = logging.getLogger(__name__)


@dataclass
class Manifest:
    """Mapping of metadata API type name to a sorted, de-duplicated list
    of member names

        manifest = Manifest().read_from_file("package.xml")
        manifest.add({"Document": ["bar/foo.png"]})
        manifest.add_from_paths(["src/classes/Foo.cls"])
        xml = manifest.to_xml()
    """
    manifest: Dict[str, List[str]] = field(default_factory=dict)
    is_deletion: bool = field(default=False, compare=False)
    api_version: str = field(default=DEFAULT_API_VERSION, compare=False)
    src_dir: str = field(default=DEFAULT_SRC_DIR, compare=False)
    registry: TypeRegistry = field(default=DEFAULT_REGISTRY, repr=False, compare=False)

    def __post_init__(self):
        self.api_version = str(self.api_version)
        self._translator = PathTranslator(self.registry, self.src_dir)
        self._engine = ManifestEngine()
        self._dedupe()

    @classmethod
    def from_file(cls, location: Union[str, Path], **kwargs) -> 'Manifest':
        """Create a manifest from a package.xml file"""
        return cls(**kwargs).read_from_file(location)

    @property
    def translator(self) -> PathTranslator:
        return self._translator

    def _dedupe(self) -> 'Manifest':
        self.manifest = {
            type_name: sorted(set([members] if isinstance(members, str) else members))
            for type_name, members in self.manifest.items()
        }
        return self

    def add(self, other: Union['Manifest', Mapping[str, Iterable[str]]]) -> 'Manifest':
        """Merge another manifest, or a raw type -> names mapping, into this one

        Args:
            other: Manifest or mapping keyed by API type name

        Returns:
            This manifest
        """
        source = other.manifest if isinstance(other, Manifest) else other

        for type_name, members in source.items():
            if isinstance(members, str):
                members = [members]
            self.manifest.setdefault(type_name, []).extend(members)

        return self._dedupe()

    def add_from_paths(self,
                       paths: Iterable[str],
                       skip_invalid: bool = False) -> 'Manifest':
        """Add the artifacts behind a list of disk paths

        Folder-grouped artifacts contribute both the folder and
        ``folder/name``; deletion manifests leave the folder out.

        Args:
            paths: Disk paths, e.g. ``src/email/Alerts/Welcome.email``
            skip_invalid: Log and skip unparseable paths instead of raising

        Returns:
            This manifest
        """
        for path in paths:
            if not path or not path.strip():
                continue

            try:
                descriptor = self._translator.parse_path(path)
            except PathError as e:
                if not skip_invalid:
                    raise
                logger.warning("Skipping %s: %s", path, e)
                continue

            api_name = self.registry.require_disk_name(descriptor.type).api_name
            logger.debug("adding... %s", descriptor.member_name)

            if descriptor.folder:
                members = [descriptor.member_name]
                if not self.is_deletion:
                    members.insert(0, descriptor.folder)
            else:
                members = [descriptor.name]

            self.add({api_name: members})

        return self

    def read_from_file(self, location: Union[str, Path]) -> 'Manifest':
        """Read a package.xml and merge its contents into this manifest"""
        return self.add(self._engine.load(location))

    def write_to_file(self, location: Union[str, Path]) -> 'Manifest':
        """Write this manifest's XML representation to a file"""
        self._engine.save(self.manifest, self.api_version, location)
        return self

    def to_xml(self) -> str:
        """XML representation of this manifest"""
        return self._engine.dumps(self.manifest, self.api_version)

    def _resolve_type(self, type_name: str) -> ArtifactType:
        artifact_type = self.registry.lookup_by_api_name(type_name)
        if artifact_type is None:
            artifact_type = self.registry.require_disk_name(type_name)
        return artifact_type

    def to_archive_file_list(self) -> List[str]:
        """List the files needed to deploy this manifest

        Use this to construct a zip file.

        Raises:
            UnknownArtifactTypeError: If a type is not registered
        """
        files = []
        for type_name in sorted(self.manifest):
            artifact_type = self._resolve_type(type_name)
            disk_name = artifact_type.disk_name
            ending = artifact_type.extension or ""

            for member in self.manifest[type_name]:
                if artifact_type.groups_into_named_folders and "/" not in member:
                    files.append(f"{disk_name}/{member}{META_FILE_SUFFIX}")
                    continue

                files.append(f"{disk_name}/{member}{ending}")
                if artifact_type.has_companion_meta_file:
                    files.append(f"{disk_name}/{member}{ending}{META_FILE_SUFFIX}")

        return files

    def snapshot(self) -> Dict[str, List[str]]:
        """Copy of the type -> members mapping for a single submitted job"""
        return copy.deepcopy(self.manifest)

    def types(self) -> List[str]:
        """API type names in this manifest"""
        return sorted(self.manifest)

    def member_count(self) -> int:
        """Total number of members across all types"""
        return sum(len(members) for members in self.manifest.values())

    def is_empty(self) -> bool:
        return self.member_count() == 0

    def to_dict(self) -> Dict[str, List[str]]:
        """Convert to dictionary"""
        return self.snapshot()

    @classmethod
    def from_dict(cls, data: Mapping[str, Iterable[str]], **kwargs) -> 'Manifest':
        """Create from dictionary"""
        return cls(**kwargs).add(data)
