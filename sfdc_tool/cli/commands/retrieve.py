"""Retrieve command implementation"""

import click

from ..decorators import report_errors
from ..utils.output import format_retrieve_result


@click.command()
@click.argument('manifest_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--dest', type=click.Path(file_okay=False),
              help='Directory to extract into (default: configured src_dir)')
@click.pass_context
@report_errors
def retrieve(ctx, manifest_file, dest):
    """Retrieve the metadata listed in a manifest

    Examples:

        sfdc-tool retrieve src/package.xml

        sfdc-tool retrieve package.xml --dest /tmp/org-snapshot
    """
    client = ctx.obj.client
    wanted = client.new_manifest().read_from_file(manifest_file)
    dest = dest or client.config.src_dir

    client.retrieve_to_dir(wanted, dest)
    format_retrieve_result(str(dest), wanted)
