"""Registry of metadata artifact types and their on-disk conventions"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from ..api.exceptions import UnknownArtifactTypeError


@dataclass(frozen=True)
class ArtifactType:
    """Metadata type entry

    ``extension`` is None for free-form types (documents) and for
    subcomponents, whose name is everything after the final ``/``.
    """
    api_name: str
    disk_name: str
    extension: Optional[str] = None
    has_companion_meta_file: bool = False
    groups_into_named_folders: bool = False
    is_subcomponent: bool = False


def _t(disk_name: str, api_name: str, extension: Optional[str] = None,
       meta: bool = False, folders: bool = False) -> ArtifactType:
    return ArtifactType(api_name, disk_name, extension, meta, folders)


def _sub(disk_name: str, api_name: str) -> ArtifactType:
    return ArtifactType(api_name, disk_name, is_subcomponent=True)


DEFAULT_TYPES: List[ArtifactType] = [
    _t("applications", "CustomApplication", ".app"),
    _t("approvalProcesses", "ApprovalProcess", ".approvalProcess"),
    _t("classes", "ApexClass", ".cls", meta=True),
    _t("components", "ApexComponent", ".component", meta=True),
    _t("datacategorygroups", "DataCategoryGroup", ".datacategorygroup"),
    _t("documents", "Document", None, meta=True, folders=True),
    _t("email", "EmailTemplate", ".email", meta=True, folders=True),
    _t("flows", "Flow", ".flow"),
    _t("groups", "Group", ".group"),
    _t("homePageComponents", "HomePageComponent", ".homePageComponent"),
    _t("homePageLayouts", "HomePageLayout", ".homePageLayout"),
    _t("labels", "CustomLabels", ".labels"),
    _t("layouts", "Layout", ".layout"),
    _t("objects", "CustomObject", ".object"),
    _t("pages", "ApexPage", ".page", meta=True),
    _t("permissionsets", "PermissionSet", ".permissionset"),
    _t("portals", "Portal", ".portal"),
    _t("profiles", "Profile", ".profile"),
    _t("queues", "Queue", ".queue"),
    _t("quickActions", "QuickAction", ".quickAction"),
    _t("remoteSiteSettings", "RemoteSiteSetting", ".remoteSite"),
    _t("reportTypes", "ReportType", ".reportType"),
    _t("reports", "Report", ".report", folders=True),
    _t("sites", "CustomSite", ".site"),
    _t("staticresources", "StaticResource", ".resource", meta=True),
    _t("tabs", "CustomTab", ".tab"),
    _t("triggers", "ApexTrigger", ".trigger", meta=True),
    _t("weblinks", "CustomPageWebLink", ".weblink"),
    _t("workflows", "Workflow", ".workflow"),
    # subcomponents
    _sub("actionOverrides", "ActionOverride"),
    _sub("alerts", "WorkflowAlert"),
    _sub("businessProcesses", "BusinessProcess"),
    _sub("fieldSets", "FieldSet"),
    _sub("fieldUpdates", "WorkflowFieldUpdate"),
    _sub("fields", "CustomField"),
    _sub("listViews", "ListView"),
    _sub("outboundMessages", "WorkflowOutboundMessage"),
    _sub("recordTypes", "RecordType"),
    _sub("rules", "WorkflowRule"),
    _sub("tasks", "WorkflowTask"),
    _sub("validationRules", "ValidationRule"),
    _sub("webLinks", "WebLink"),
]


class TypeRegistry:
    """Bidirectional lookup between disk folder names and API type names"""

    def __init__(self, types: Optional[Iterable[ArtifactType]] = None):
        """Initialize registry

        Args:
            types: Registry entries (defaults to the built-in table)

        Raises:
            ValueError: If a disk name or API name appears twice
        """
        self._by_disk_name: Dict[str, ArtifactType] = {}
        self._by_api_name: Dict[str, ArtifactType] = {}

        for artifact_type in (DEFAULT_TYPES if types is None else types):
            if artifact_type.disk_name in self._by_disk_name:
                raise ValueError(f"Duplicate disk name: {artifact_type.disk_name}")
            if artifact_type.api_name in self._by_api_name:
                raise ValueError(f"Duplicate API name: {artifact_type.api_name}")
            self._by_disk_name[artifact_type.disk_name] = artifact_type
            self._by_api_name[artifact_type.api_name] = artifact_type

    def lookup_by_disk_name(self, name: str) -> Optional[ArtifactType]:
        """Find a type by its folder name on disk, e.g. ``classes``"""
        return self._by_disk_name.get(name)

    def lookup_by_api_name(self, name: str) -> Optional[ArtifactType]:
        """Find a type by its metadata API name, e.g. ``ApexClass``"""
        return self._by_api_name.get(name)

    def require_disk_name(self, name: str) -> ArtifactType:
        """Like lookup_by_disk_name, but raise when the type is unknown

        Raises:
            UnknownArtifactTypeError: If no such type is registered
        """
        artifact_type = self.lookup_by_disk_name(name)
        if artifact_type is None:
            raise UnknownArtifactTypeError(name)
        return artifact_type

    def require_api_name(self, name: str) -> ArtifactType:
        """Like lookup_by_api_name, but raise when the type is unknown

        Raises:
            UnknownArtifactTypeError: If no such type is registered
        """
        artifact_type = self.lookup_by_api_name(name)
        if artifact_type is None:
            raise UnknownArtifactTypeError(name)
        return artifact_type

    def __iter__(self) -> Iterator[ArtifactType]:
        return iter(self._by_disk_name.values())

    def __len__(self) -> int:
        return len(self._by_disk_name)

    def __contains__(self, disk_name: str) -> bool:
        return disk_name in self._by_disk_name


DEFAULT_REGISTRY = TypeRegistry()
