"""List command implementation"""

import click

from ..decorators import report_errors
from ..utils.output import console, format_file_list
from ...constants import MSG_MANIFEST_WRITTEN


@click.command(name='list')
@click.argument('queries', nargs=-1, required=True)
@click.option('-o', '--output', type=click.Path(dir_okay=False),
              help='Write the listing as a manifest')
@click.pass_context
@report_errors
def list_metadata(ctx, queries, output):
    """List metadata on the server

    Each query is a metadata type, optionally with a folder.

    Examples:

        sfdc-tool list CustomObject ApexClass

        sfdc-tool list Report:SalesReports -o reports.xml
    """
    client = ctx.obj.client
    names = client.list_metadata(*queries)

    if output:
        listed = client.new_manifest().add_from_paths(names, skip_invalid=True)
        listed.write_to_file(output)
        console.print(MSG_MANIFEST_WRITTEN.format(path=output, count=listed.member_count()))
    else:
        format_file_list(sorted(names))
