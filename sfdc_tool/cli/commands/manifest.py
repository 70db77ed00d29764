"""Manifest commands"""

import click

from ..decorators import report_errors
from ..utils.output import console, format_file_list, format_manifest
from ...constants import DEFAULT_API_VERSION, DEFAULT_SRC_DIR, MSG_MANIFEST_WRITTEN
from ...models.config import validate_api_version
from ...models.manifest import Manifest


@click.group()
def manifest():
    """Build and inspect package.xml manifests"""
    pass


@manifest.command()
@click.argument('paths', nargs=-1)
@click.option('-f', '--from-file', 'path_file', type=click.File('r'),
              help="Read paths from a file, one per line ('-' for stdin)")
@click.option('--deletion', is_flag=True,
              help='Build a destructive-changes manifest (folders are left out)')
@click.option('--api-version', default=DEFAULT_API_VERSION, show_default=True,
              help='API version written to the manifest')
@click.option('--src-dir', default=DEFAULT_SRC_DIR, show_default=True,
              help='Source root segment stripped from paths')
@click.option('--skip-invalid', is_flag=True, help='Skip paths that cannot be parsed')
@click.option('-o', '--output', type=click.Path(dir_okay=False),
              help='Write the manifest here instead of printing it')
@report_errors
def build(paths, path_file, deletion, api_version, src_dir, skip_invalid, output):
    """Build a manifest from source paths

    Examples:

        # From explicit paths
        sfdc-tool manifest build src/classes/Foo.cls src/email/Alerts/Welcome.email

        # From the files changed on a branch
        git diff --name-only main | sfdc-tool manifest build -f - -o src/package.xml
    """
    all_paths = list(paths)
    if path_file:
        all_paths.extend(line.strip() for line in path_file)

    if not all_paths:
        raise click.UsageError("No paths given")

    result = Manifest(
        is_deletion=deletion,
        api_version=validate_api_version(api_version),
        src_dir=src_dir,
    ).add_from_paths(all_paths, skip_invalid=skip_invalid)

    if output:
        result.write_to_file(output)
        console.print(MSG_MANIFEST_WRITTEN.format(path=output, count=result.member_count()))
    else:
        click.echo(result.to_xml())


@manifest.command()
@click.argument('manifest_file', type=click.Path(exists=True, dir_okay=False))
@report_errors
def files(manifest_file):
    """List the files a manifest needs for deployment

    Paths are relative to the source root.
    """
    format_file_list(Manifest.from_file(manifest_file).to_archive_file_list())


@manifest.command()
@click.argument('manifest_file', type=click.Path(exists=True, dir_okay=False))
@report_errors
def show(manifest_file):
    """Show a manifest's types and members"""
    format_manifest(Manifest.from_file(manifest_file), title=str(manifest_file))
