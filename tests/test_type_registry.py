"""
Tests for TypeRegistry (core/type_registry.py).
"""

import pytest

from sfdc_tool.api.exceptions import UnknownArtifactTypeError
from sfdc_tool.core.type_registry import ArtifactType, DEFAULT_REGISTRY, TypeRegistry


class TestDefaultRegistry:

    def test_lookup_by_disk_name(self):
        classes = DEFAULT_REGISTRY.lookup_by_disk_name("classes")
        assert classes.api_name == "ApexClass"
        assert classes.extension == ".cls"
        assert classes.has_companion_meta_file is True
        assert classes.groups_into_named_folders is False

    def test_lookup_by_api_name(self):
        email = DEFAULT_REGISTRY.lookup_by_api_name("EmailTemplate")
        assert email.disk_name == "email"
        assert email.groups_into_named_folders is True
        assert email.has_companion_meta_file is True

    def test_documents_have_no_fixed_extension(self):
        documents = DEFAULT_REGISTRY.lookup_by_disk_name("documents")
        assert documents.extension is None
        assert documents.groups_into_named_folders is True

    def test_reports_use_folders_without_meta(self):
        reports = DEFAULT_REGISTRY.require_api_name("Report")
        assert reports.groups_into_named_folders is True
        assert reports.has_companion_meta_file is False

    def test_subcomponents(self):
        fields = DEFAULT_REGISTRY.lookup_by_disk_name("fields")
        assert fields.api_name == "CustomField"
        assert fields.is_subcomponent is True

    def test_miss_returns_none(self):
        assert DEFAULT_REGISTRY.lookup_by_disk_name("widgets") is None
        assert DEFAULT_REGISTRY.lookup_by_api_name("Widget") is None

    def test_require_raises(self):
        with pytest.raises(UnknownArtifactTypeError) as exc_info:
            DEFAULT_REGISTRY.require_disk_name("widgets")
        assert exc_info.value.type_name == "widgets"
        with pytest.raises(UnknownArtifactTypeError):
            DEFAULT_REGISTRY.require_api_name("Widget")

    def test_lookups_are_case_sensitive(self):
        assert DEFAULT_REGISTRY.lookup_by_disk_name("Classes") is None

    def test_bidirectional(self):
        for artifact_type in DEFAULT_REGISTRY:
            assert DEFAULT_REGISTRY.lookup_by_api_name(artifact_type.api_name) is artifact_type
            assert DEFAULT_REGISTRY.lookup_by_disk_name(artifact_type.disk_name) is artifact_type

    def test_contains_and_len(self):
        assert "objects" in DEFAULT_REGISTRY
        assert "CustomObject" not in DEFAULT_REGISTRY
        assert len(DEFAULT_REGISTRY) == len(list(DEFAULT_REGISTRY))


class TestCustomRegistry:

    def test_custom_types(self):
        registry = TypeRegistry([ArtifactType("Widget", "widgets", ".widget")])
        assert len(registry) == 1
        assert registry.require_disk_name("widgets").api_name == "Widget"
        assert registry.lookup_by_disk_name("classes") is None

    def test_duplicate_disk_name(self):
        with pytest.raises(ValueError, match="Duplicate disk name"):
            TypeRegistry([
                ArtifactType("Widget", "widgets", ".widget"),
                ArtifactType("Gadget", "widgets", ".gadget"),
            ])

    def test_duplicate_api_name(self):
        with pytest.raises(ValueError, match="Duplicate API name"):
            TypeRegistry([
                ArtifactType("Widget", "widgets", ".widget"),
                ArtifactType("Widget", "gadgets", ".gadget"),
            ])
