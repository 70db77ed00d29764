"""Execute anonymous Apex command"""

import click

from ..decorators import report_errors
from ..utils.output import format_apex_result


@click.command()
@click.argument('source', type=click.File('r'))
@click.option('--debug-log', is_flag=True, help='Print the debug log')
@click.option('--tooling', is_flag=True, help='Run through the tooling API instead')
@click.pass_context
@report_errors
def execute(ctx, source, debug_log, tooling):
    """Execute anonymous Apex from a file ('-' for stdin)

    Examples:

        echo "System.debug('hi');" | sfdc-tool execute - --debug-log

        sfdc-tool execute scripts/cleanup.apex --tooling
    """
    if tooling and debug_log:
        raise click.UsageError("--debug-log cannot be combined with --tooling")

    result, log = ctx.obj.client.execute_anonymous(
        source.read(), debug=debug_log, tooling=tooling
    )
    format_apex_result(result, log)
