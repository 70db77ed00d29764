"""Translation between on-disk metadata paths and artifact identities"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .type_registry import ArtifactType, TypeRegistry, DEFAULT_REGISTRY
from ..api.exceptions import MalformedPathError, MissingNameError
from ..constants import (
    DEFAULT_SRC_DIR,
    META_FILE_SUFFIX,
    TYPE_SEGMENT_PATTERN,
    FOLDER_SEGMENT_PATTERN,
    BARE_META_PATTERN,
    FREEFORM_NAME_PATTERN,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactDescriptor:
    """Structured identity of a single file under the source tree"""
    type: str  # Disk folder name, e.g. "email"
    name: str
    folder: Optional[str] = None
    extension: str = ""  # Registered extension, never including -meta.xml
    is_meta: bool = False  # Parsed path was the -meta.xml companion

    @property
    def member_name(self) -> str:
        """Manifest member for this artifact (``folder/name`` or ``name``)"""
        if self.folder:
            return f"{self.folder}/{self.name}"
        return self.name


class PathTranslator:
    """Parses disk paths into descriptors and expands descriptors into
    the archive entries needed to deploy them"""

    def __init__(self,
                 registry: Optional[TypeRegistry] = None,
                 src_dir: str = DEFAULT_SRC_DIR):
        """Initialize path translator

        Args:
            registry: Type registry (defaults to the built-in table)
            src_dir: Name of the source-root segment stripped from paths
        """
        self.registry = registry or DEFAULT_REGISTRY
        self.src_dir = src_dir
        self._src_prefix = re.compile(rf"(?:^|.*/){re.escape(src_dir)}/")

    def clean(self, path: str) -> str:
        """Strip everything up to the source root and any line endings"""
        path = path.replace("\\", "/")
        path = re.sub(r"[\n\r]", "", path)
        return self._src_prefix.sub("", path, count=1)

    def parse_path(self, path: str) -> ArtifactDescriptor:
        """Parse a path such as ``email/foo/bar.email-meta.xml``

        Args:
            path: Path relative to (or containing) the source root

        Returns:
            Descriptor with type, folder, name and extension

        Raises:
            MalformedPathError: If the path has no type segment
            UnknownArtifactTypeError: If the type segment is not registered
            MissingNameError: If no name can be extracted
        """
        if not path:
            raise MalformedPathError(path or "")

        line = self.clean(path)

        type_match = TYPE_SEGMENT_PATTERN.match(line)
        if not type_match:
            raise MalformedPathError(line)

        artifact_type = self.registry.require_disk_name(type_match.group(1))

        folder = None
        if artifact_type.groups_into_named_folders:
            folder_match = FOLDER_SEGMENT_PATTERN.search(line)
            if folder_match:
                folder = folder_match.group(1)

        name, extension = self._split_name(line, artifact_type)
        if not name:
            raise MissingNameError(line)

        descriptor = ArtifactDescriptor(
            type=artifact_type.disk_name,
            name=name,
            folder=folder,
            extension=extension,
            is_meta=line.endswith(META_FILE_SUFFIX),
        )
        logger.debug("Parsed %s -> %s", line, descriptor)
        return descriptor

    def _split_name(self, line: str, artifact_type: ArtifactType):
        bare_meta = BARE_META_PATTERN.search(line)
        if bare_meta:
            return bare_meta.group(1), ""

        if artifact_type.extension is None:
            match = FREEFORM_NAME_PATTERN.search(line)
            if not match:
                return None, ""
            # Listings of deleted components use ':' in place of '.'
            return match.group(1).replace(":", "."), ""

        pattern = rf"/([^/]*?)({re.escape(artifact_type.extension)})(-meta\.xml)?$"
        match = re.search(pattern, line)
        if not match:
            return None, ""
        return match.group(1), match.group(2)

    def expand_to_archive_entries(self, descriptor: ArtifactDescriptor) -> List[str]:
        """List every archive entry needed to deploy an artifact

        For ``email/foo/bar.email`` this yields::

            email/foo-meta.xml
            email/foo/bar.email
            email/foo/bar.email-meta.xml

        Args:
            descriptor: Parsed artifact

        Returns:
            Archive paths, folder meta file first
        """
        artifact_type = self.registry.require_disk_name(descriptor.type)
        leaf = f"{descriptor.name}{descriptor.extension}"

        entries = []
        if descriptor.folder:
            entries.append(f"{descriptor.folder}{META_FILE_SUFFIX}")
            leaf = f"{descriptor.folder}/{leaf}"

        entries.append(leaf)
        if artifact_type.has_companion_meta_file:
            entries.append(f"{leaf}{META_FILE_SUFFIX}")

        return [f"{descriptor.type}/{entry}" for entry in entries]

    def primary_path(self, descriptor: ArtifactDescriptor) -> str:
        """Path of the artifact's own file, without companions"""
        return self.expand_to_archive_entries(descriptor)[1 if descriptor.folder else 0]

    def archive_entries_for_path(self, path: str) -> List[str]:
        """Convenience: parse a path and expand it in one step"""
        if not path or not path.strip():
            return []
        return self.expand_to_archive_entries(self.parse_path(path))
