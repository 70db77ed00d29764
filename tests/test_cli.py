"""
Tests for the command line interface (cli/), using click's CliRunner.
"""

import base64
import io
import json
import zipfile

import pytest
import yaml
from click.testing import CliRunner

from sfdc_tool.api.client import SFDCClient
from sfdc_tool.cli.main import cli
from sfdc_tool.models.manifest import Manifest
from sfdc_tool.transport.base import CallResult


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, monkeypatch, transport, sleeper):
    for name in ("SFDC_USERNAME", "SFDC_PASSWORD", "SFDC_URL", "SFDC_API_VERSION", "SFDC_POLL_INTERVAL"):
        monkeypatch.delenv(name, raising=False)

    path = tmp_path / ".sfdc-tool.yaml"
    path.write_text(yaml.dump({
        "credentials": {"username": "me@example.com", "password": "pw"},
        "polling": {"interval": 0},
        "src_dir": str(tmp_path / "src"),
    }))
    monkeypatch.setattr(
        "sfdc_tool.cli.main.SFDCClient",
        lambda config: SFDCClient(config, transport=transport, sleep=sleeper),
    )
    return path


@pytest.fixture
def package_xml(tmp_path):
    path = tmp_path / "package.xml"
    Manifest().add({"ApexClass": ["Foo"]}).write_to_file(path)
    return path


# ============================================================================
# manifest
# ============================================================================

class TestManifestCommands:

    def test_build_prints_xml(self, runner):
        result = runner.invoke(cli, [
            "manifest", "build", "src/classes/Foo.cls", "src/email/Alerts/Welcome.email",
        ])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == Manifest().add({
            "ApexClass": ["Foo"],
            "EmailTemplate": ["Alerts", "Alerts/Welcome"],
        }).to_xml()

    def test_build_from_stdin_to_file(self, runner, tmp_path):
        output = tmp_path / "out.xml"
        result = runner.invoke(
            cli,
            ["manifest", "build", "-f", "-", "--deletion", "--api-version", "40", "-o", str(output)],
            input="src/email/Alerts/Welcome.email\n\nsrc/pages/Home.page\n",
        )
        assert result.exit_code == 0, result.output

        written = Manifest.from_file(output)
        assert written.manifest == {"ApexPage": ["Home"], "EmailTemplate": ["Alerts/Welcome"]}
        assert "<version>40.0</version>" in output.read_text()

    def test_build_without_paths(self, runner):
        result = runner.invoke(cli, ["manifest", "build"])
        assert result.exit_code == 2

    def test_build_unknown_type(self, runner):
        result = runner.invoke(cli, ["manifest", "build", "src/widgets/Foo.widget"])
        assert result.exit_code == 1
        assert "Unknown artifact type" in result.output

    def test_build_skip_invalid(self, runner):
        result = runner.invoke(cli, ["manifest", "build", "--skip-invalid", "README", "src/pages/Home.page"])
        assert result.exit_code == 0, result.output
        assert "<members>Home</members>" in result.output

    def test_files(self, runner, package_xml):
        result = runner.invoke(cli, ["manifest", "files", str(package_xml)])
        assert result.exit_code == 0, result.output
        assert result.output.split() == ["classes/Foo.cls", "classes/Foo.cls-meta.xml"]

    def test_show(self, runner, package_xml):
        result = runner.invoke(cli, ["manifest", "show", str(package_xml)])
        assert result.exit_code == 0, result.output
        assert "ApexClass" in result.output


# ============================================================================
# remote commands
# ============================================================================

class TestRemoteCommands:

    def test_retrieve(self, runner, config_file, package_xml, transport, tmp_path):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("unpackaged/classes/Foo.cls", "public class Foo {}")
        transport.script("retrieve", CallResult.ok({"id": "09S1"}))
        transport.script("checkRetrieveStatus", CallResult.ok({
            "status": "Succeeded",
            "zipFile": base64.b64encode(buffer.getvalue()).decode("ascii"),
        }))

        result = runner.invoke(cli, ["--config", str(config_file), "retrieve", str(package_xml)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "src" / "classes" / "Foo.cls").exists()

    def test_retrieve_failure(self, runner, config_file, package_xml, transport):
        transport.script("retrieve", CallResult.ok({"id": "09S1"}))
        transport.script("checkRetrieveStatus", CallResult.ok({"status": "Failed", "errorMessage": "boom"}))

        result = runner.invoke(cli, ["--config", str(config_file), "retrieve", str(package_xml)])

        assert result.exit_code == 1
        assert "boom" in result.output

    def test_deploy_check_only(self, runner, config_file, package_xml, transport, tmp_path):
        src = tmp_path / "src" / "classes"
        src.mkdir(parents=True)
        (src / "Foo.cls").write_text("public class Foo {}")
        (src / "Foo.cls-meta.xml").write_text("<ApexClass/>")
        transport.script("deploy", CallResult.ok({"id": "0Af1", "state": "Queued"}))
        transport.script("checkDeployStatus", CallResult.ok({"id": "0Af1", "status": "Succeeded"}))

        result = runner.invoke(cli, [
            "--config", str(config_file),
            "deploy", str(package_xml), "--check-only", "--run-tests", "FooTest",
        ])

        assert result.exit_code == 0, result.output
        assert "0Af1" in result.output
        options = dict(transport.calls_to("deploy")[0]["parameters"])["DeployOptions"]
        assert options == {
            "checkOnly": True,
            "rollbackOnError": True,
            "runTests": ["FooTest"],
            "testLevel": "RunSpecifiedTests",
        }

    def test_deploy_quick(self, runner, config_file, transport):
        transport.script("deployRecentValidation", CallResult.ok("0Af2"))
        result = runner.invoke(cli, ["--config", str(config_file), "deploy", "--quick", "0Af1"])
        assert result.exit_code == 0, result.output
        assert "0Af2" in result.output

    def test_deploy_needs_manifest(self, runner, config_file):
        result = runner.invoke(cli, ["--config", str(config_file), "deploy"])
        assert result.exit_code == 2

    def test_list(self, runner, config_file, transport):
        transport.script("listMetadata", CallResult.ok([
            {"fileName": "objects/Contact.object"},
            {"fileName": "objects/Account.object"},
        ]))
        result = runner.invoke(cli, ["--config", str(config_file), "list", "CustomObject"])
        assert result.exit_code == 0, result.output
        assert result.output.split() == ["objects/Account.object", "objects/Contact.object"]

    def test_query_json(self, runner, config_file, transport):
        transport.script("query", CallResult.ok({
            "done": "true",
            "records": {"type": "Account", "Id": ["001A", "001A"], "Name": "Acme"},
        }))
        result = runner.invoke(cli, ["--config", str(config_file), "query", "SELECT Id, Name FROM Account", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == [{"type": "Account", "Id": "001A", "Name": "Acme"}]

    def test_execute(self, runner, config_file, transport):
        transport.script("executeAnonymous", CallResult.ok({"compiled": "true", "success": "true"}))
        result = runner.invoke(cli, ["--config", str(config_file), "execute", "-"], input="Integer i = 1;")
        assert result.exit_code == 0, result.output
        assert transport.calls_to("executeAnonymous")[0]["parameters"] == [("String", "Integer i = 1;")]

    def test_execute_tooling(self, runner, config_file, transport):
        transport.script("executeAnonymous", CallResult.ok({"compiled": "true", "success": "true"}))
        result = runner.invoke(cli, ["--config", str(config_file), "execute", "-", "--tooling"], input="Integer i = 1;")
        assert result.exit_code == 0, result.output
        call = transport.calls_to("executeAnonymous")[0]
        assert "/T/" in call["endpoint"]
        assert call["parameters"] == [("string", "Integer i = 1;")]

    def test_execute_tooling_has_no_debug_log(self, runner, config_file):
        result = runner.invoke(
            cli, ["--config", str(config_file), "execute", "-", "--tooling", "--debug-log"], input="",
        )
        assert result.exit_code == 2

    def test_missing_configuration(self, runner, tmp_path, monkeypatch, package_xml):
        for name in ("SFDC_USERNAME", "SFDC_PASSWORD", "SFDC_URL", "SFDC_API_VERSION", "SFDC_POLL_INTERVAL"):
            monkeypatch.delenv(name, raising=False)
        result = runner.invoke(cli, ["--config", str(tmp_path / "none.yaml"), "retrieve", str(package_xml)])
        assert result.exit_code == 1
        assert "credentials" in result.output
