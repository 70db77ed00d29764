"""Deploy command implementation"""

import click

from ..decorators import report_errors
from ..utils.output import format_deploy_result


def build_deploy_options(check_only: bool, run_tests) -> dict:
    """DeployOptions in the order the server's schema declares them"""
    options = {
        "checkOnly": check_only,
        "rollbackOnError": True,
    }
    if run_tests:
        options["runTests"] = list(run_tests)
        options["testLevel"] = "RunSpecifiedTests"
    return options


@click.command()
@click.argument('manifest_file', required=False,
                type=click.Path(exists=True, dir_okay=False))
@click.option('--src', 'src_dir', type=click.Path(exists=True, file_okay=False),
              help='Source root holding the files (default: configured src_dir)')
@click.option('--check-only', is_flag=True, help='Validate without saving changes')
@click.option('--run-tests', multiple=True, metavar='CLASS',
              help='Run the named test class (repeatable)')
@click.option('--quick', 'validation_id', metavar='ID',
              help='Promote a recent successful validation instead')
@click.pass_context
@report_errors
def deploy(ctx, manifest_file, src_dir, check_only, run_tests, validation_id):
    """Deploy the files listed in a manifest

    The listed files are zipped together with the manifest, which goes
    into the archive as package.xml, and deployed.

    Examples:

        # Validate first
        sfdc-tool deploy src/package.xml --check-only --run-tests MyTest

        # Then promote the validation
        sfdc-tool deploy --quick 0Af000000000001
    """
    client = ctx.obj.client

    if validation_id:
        if manifest_file:
            raise click.UsageError("--quick cannot be combined with a manifest")
        job_id = client.deploy_recent_validation(validation_id)
        format_deploy_result(job_id)
        return

    if not manifest_file:
        raise click.UsageError("Must specify a manifest or --quick")

    wanted = client.new_manifest().read_from_file(manifest_file)
    job_id = client.deploy_from_manifest(
        wanted,
        src_dir,
        build_deploy_options(check_only, run_tests),
    )
    format_deploy_result(job_id, check_only=check_only)
