"""
Tests for Manifest (models/manifest.py) and ManifestEngine (core/manifest_engine.py).
"""

import pytest

from sfdc_tool.api.exceptions import ManifestError, MalformedPathError, UnknownArtifactTypeError
from sfdc_tool.core.manifest_engine import ManifestEngine
from sfdc_tool.models.manifest import Manifest


HEADER = (
    "<?xml version='1.0' encoding='UTF-8'?>"
    "<Package xmlns='http://soap.sforce.com/2006/04/metadata'>"
)


# ============================================================================
# add
# ============================================================================

class TestAdd:

    def test_add_sorts_and_dedupes(self):
        manifest = Manifest().add({"ApexClass": ["Zed", "Alpha", "Zed"]})
        assert manifest.manifest == {"ApexClass": ["Alpha", "Zed"]}

    def test_add_is_idempotent(self):
        data = {"ApexClass": ["Foo", "Bar"], "Profile": ["Admin"]}
        once = Manifest().add(data)
        twice = Manifest().add(data).add(data)
        assert once == twice

    def test_add_is_commutative(self):
        a = {"ApexClass": ["Foo"], "Profile": ["Admin"]}
        b = {"ApexClass": ["Bar"], "CustomObject": ["Account"]}
        assert Manifest().add(a).add(b) == Manifest().add(b).add(a)

    def test_add_manifest(self):
        other = Manifest().add({"ApexPage": ["Home"]})
        manifest = Manifest().add({"ApexClass": ["Foo"]}).add(other)
        assert manifest.types() == ["ApexClass", "ApexPage"]
        assert manifest.member_count() == 2

    def test_add_single_string(self):
        manifest = Manifest().add({"Document": "bar/foo.png"})
        assert manifest.manifest == {"Document": ["bar/foo.png"]}

    def test_equality_ignores_api_version(self):
        assert Manifest(api_version="33.0").add({"A": ["x"]}) == \
            Manifest(api_version="40.0").add({"A": ["x"]})

    def test_constructor_dedupes(self):
        assert Manifest({"ApexClass": ["b", "a", "b"]}).manifest == {"ApexClass": ["a", "b"]}

    def test_constructor_wraps_single_string(self):
        assert Manifest({"ApexClass": "Foo"}).manifest == {"ApexClass": ["Foo"]}

    def test_is_empty(self):
        assert Manifest().is_empty()
        assert not Manifest().add({"ApexClass": ["Foo"]}).is_empty()


# ============================================================================
# add_from_paths
# ============================================================================

class TestAddFromPaths:

    def test_paths_are_keyed_by_api_name(self):
        manifest = Manifest().add_from_paths([
            "src/classes/Foo.cls",
            "src/classes/Foo.cls-meta.xml",
            "src/email/Alerts/Welcome.email",
            "",
        ])
        assert manifest.manifest == {
            "ApexClass": ["Foo"],
            "EmailTemplate": ["Alerts", "Alerts/Welcome"],
        }

    def test_deletion_manifest_leaves_out_folders(self):
        manifest = Manifest(is_deletion=True).add_from_paths(["src/email/Alerts/Welcome.email"])
        assert manifest.manifest == {"EmailTemplate": ["Alerts/Welcome"]}

    def test_invalid_path_raises(self):
        with pytest.raises(MalformedPathError):
            Manifest().add_from_paths(["README"])

    def test_skip_invalid(self):
        manifest = Manifest().add_from_paths(["README", "src/pages/Home.page"], skip_invalid=True)
        assert manifest.manifest == {"ApexPage": ["Home"]}

    def test_unknown_type_is_not_skipped(self):
        with pytest.raises(UnknownArtifactTypeError):
            Manifest().add_from_paths(["src/widgets/Foo.widget"], skip_invalid=True)

    def test_listing_file_names(self):
        manifest = Manifest().add_from_paths(["objects/Account.object", "reports/Sales/Pipeline.report"])
        assert manifest.manifest == {
            "CustomObject": ["Account"],
            "Report": ["Sales", "Sales/Pipeline"],
        }


# ============================================================================
# XML
# ============================================================================

class TestXml:

    def test_custom_object_xml(self):
        manifest = Manifest(api_version="33.0").add({"CustomObject": ["Custom__c", "Account"]})
        assert manifest.to_xml() == (
            HEADER
            + "<types><name>CustomObject</name>"
            "<members>Account</members><members>Custom__c</members></types>"
            "<version>33.0</version></Package>"
        )

    def test_types_sorted_and_version_last(self):
        xml = Manifest().add({"Profile": ["Admin"], "ApexClass": ["Foo"]}).to_xml()
        assert xml.index("<name>ApexClass</name>") < xml.index("<name>Profile</name>")
        assert xml.endswith("<version>33.0</version></Package>")

    def test_xml_is_deterministic(self):
        a = Manifest().add({"ApexClass": ["B"]}).add({"Profile": ["P"], "ApexClass": ["A"]})
        b = Manifest().add({"ApexClass": ["A", "B"]}).add({"Profile": ["P"]})
        assert a.to_xml() == b.to_xml()

    def test_members_are_escaped(self):
        xml = Manifest().add({"Report": ["R&D/Pipeline"]}).to_xml()
        assert "<members>R&amp;D/Pipeline</members>" in xml

    def test_write_and_read(self, tmp_path):
        location = tmp_path / "out" / "package.xml"
        original = Manifest().add({"ApexClass": ["Foo"], "EmailTemplate": ["Alerts", "Alerts/Welcome"]})
        original.write_to_file(location)

        assert location.read_text(encoding="utf-8") == original.to_xml()
        assert Manifest.from_file(location) == original

    def test_read_merges(self, tmp_path):
        location = tmp_path / "package.xml"
        Manifest().add({"ApexClass": ["Foo"]}).write_to_file(location)
        manifest = Manifest().add({"ApexClass": ["Bar"]}).read_from_file(location)
        assert manifest.manifest == {"ApexClass": ["Bar", "Foo"]}

    def test_read_pretty_printed_file(self, tmp_path):
        location = tmp_path / "package.xml"
        location.write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<Package xmlns="http://soap.sforce.com/2006/04/metadata">\n'
            '    <types>\n'
            '        <members>*</members>\n'
            '        <name>ApexClass</name>\n'
            '    </types>\n'
            '    <types>\n'
            '        <members>Admin</members>\n'
            '        <name>ApexClass</name>\n'
            '    </types>\n'
            '    <version>40.0</version>\n'
            '</Package>\n'
        )
        assert Manifest.from_file(location).manifest == {"ApexClass": ["*", "Admin"]}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError, match="not found"):
            Manifest.from_file(tmp_path / "nope.xml")


class TestManifestEngine:

    def test_invalid_xml(self):
        with pytest.raises(ManifestError):
            ManifestEngine().loads("<Package>")

    def test_wrong_root(self):
        with pytest.raises(ManifestError, match="root"):
            ManifestEngine().loads("<Project/>")

    def test_types_without_name(self):
        with pytest.raises(ManifestError, match="name"):
            ManifestEngine().loads("<Package><types><members>Foo</members></types></Package>")

    def test_empty_manifest(self):
        assert ManifestEngine().dumps({}, "33.0") == HEADER + "<version>33.0</version></Package>"


# ============================================================================
# to_archive_file_list
# ============================================================================

class TestArchiveFileList:

    def test_class_with_meta(self):
        assert Manifest().add({"classes": ["Foo"]}).to_archive_file_list() == [
            "classes/Foo.cls",
            "classes/Foo.cls-meta.xml",
        ]

    def test_api_type_names(self):
        assert Manifest().add({"ApexClass": ["Foo"]}).to_archive_file_list() == [
            "classes/Foo.cls",
            "classes/Foo.cls-meta.xml",
        ]

    def test_folder_members(self):
        manifest = Manifest().add({"EmailTemplate": ["Alerts", "Alerts/Welcome"]})
        assert manifest.to_archive_file_list() == [
            "email/Alerts-meta.xml",
            "email/Alerts/Welcome.email",
            "email/Alerts/Welcome.email-meta.xml",
        ]

    def test_documents_keep_their_own_extension(self):
        manifest = Manifest().add({"Document": ["Shared/logo.png"]})
        assert manifest.to_archive_file_list() == [
            "documents/Shared/logo.png",
            "documents/Shared/logo.png-meta.xml",
        ]

    def test_type_without_meta(self):
        assert Manifest().add({"CustomObject": ["Account"]}).to_archive_file_list() == [
            "objects/Account.object",
        ]

    def test_round_trip_with_paths(self):
        paths = [
            "classes/Foo.cls",
            "classes/Foo.cls-meta.xml",
            "email/Alerts-meta.xml",
            "email/Alerts/Welcome.email",
            "email/Alerts/Welcome.email-meta.xml",
        ]
        assert Manifest().add_from_paths(paths).to_archive_file_list() == paths

    def test_unknown_type(self):
        with pytest.raises(UnknownArtifactTypeError):
            Manifest().add({"Widget": ["Foo"]}).to_archive_file_list()
