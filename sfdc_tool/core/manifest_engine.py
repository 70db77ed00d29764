"""Manifest engine for reading and writing package.xml files"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Mapping, Union
from xml.sax.saxutils import escape

from ..api.exceptions import ManifestError
from ..constants import MANIFEST_XML_DECLARATION, METADATA_NAMESPACE

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


class ManifestEngine:
    """Codec for the vendor's package manifest format

    The output is byte-stable: types in ascending order, members in
    ascending order within each type, version element last, no whitespace
    between elements.
    """

    def __init__(self, namespace: str = METADATA_NAMESPACE):
        self.namespace = namespace

    def dumps(self, members: Mapping[str, List[str]], api_version: str) -> str:
        """Render a manifest mapping as XML

        Args:
            members: Mapping of API type name to member names
            api_version: Value of the trailing version element

        Returns:
            XML document as a string
        """
        parts = [
            MANIFEST_XML_DECLARATION,
            f"<Package xmlns='{self.namespace}'>",
        ]

        for type_name in sorted(members):
            parts.append("<types>")
            parts.append(f"<name>{escape(type_name)}</name>")
            for member in sorted(set(members[type_name])):
                parts.append(f"<members>{escape(member)}</members>")
            parts.append("</types>")

        parts.append(f"<version>{escape(str(api_version))}</version></Package>")
        return "".join(parts)

    def save(self,
             members: Mapping[str, List[str]],
             api_version: str,
             location: Union[str, Path]) -> Path:
        """Write a manifest to disk

        Returns:
            Path to the written file
        """
        path = Path(location)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.dumps(members, api_version), encoding='utf-8')
        logger.info("Wrote manifest %s", path)
        return path

    def loads(self, text: Union[str, bytes]) -> Dict[str, List[str]]:
        """Parse manifest XML into a type -> members mapping

        Raises:
            ManifestError: If the document is not a valid manifest
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ManifestError(f"Invalid manifest XML: {e}")

        if _local_name(root.tag) != "Package":
            raise ManifestError(f"Unexpected manifest root element: {_local_name(root.tag)}")

        result: Dict[str, List[str]] = {}
        for types_el in root:
            if _local_name(types_el.tag) != "types":
                continue

            type_name = None
            members = []
            for child in types_el:
                tag = _local_name(child.tag)
                if tag == "name":
                    type_name = (child.text or "").strip()
                elif tag == "members":
                    members.append((child.text or "").strip())

            if not type_name:
                raise ManifestError("Manifest <types> block is missing <name>")

            result.setdefault(type_name, []).extend(members)

        return result

    def load(self, location: Union[str, Path]) -> Dict[str, List[str]]:
        """Read a manifest file from disk

        Raises:
            ManifestError: If the file is missing or malformed
        """
        path = Path(location)
        if not path.exists():
            raise ManifestError(f"Manifest file not found: {path}")

        logger.debug("Reading manifest %s", path)
        return self.loads(path.read_bytes())
