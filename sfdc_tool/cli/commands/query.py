"""Query command implementation"""

import json

import click

from ..decorators import report_errors
from ..utils.output import format_records


@click.command()
@click.argument('soql')
@click.option('--all', 'include_deleted', is_flag=True,
              help='Include deleted and archived records')
@click.option('--json', 'as_json', is_flag=True, help='Print records as JSON')
@click.pass_context
@report_errors
def query(ctx, soql, include_deleted, as_json):
    """Run a SOQL query

    Examples:

        sfdc-tool query "SELECT Id, Name FROM Account LIMIT 10"
    """
    records = ctx.obj.client.query(soql, include_deleted=include_deleted)

    if as_json:
        click.echo(json.dumps(records, indent=2, default=str))
    else:
        format_records(records)
