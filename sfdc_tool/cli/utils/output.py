# sfdc_tool/cli/utils/output.py
"""Output formatting utilities"""

from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...api.exceptions import SFDCToolError
from ...constants import EMOJI_ERROR, EMOJI_SUCCESS
from ...models.manifest import Manifest

console = Console()


def format_manifest(manifest: Manifest, title: str = "Manifest") -> None:
    """Display a manifest as a type/member table"""
    if manifest.is_empty():
        console.print("[yellow]Manifest is empty[/yellow]")
        return

    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Type", style="cyan")
    table.add_column("Members", style="green")

    for type_name in manifest.types():
        table.add_row(type_name, "\n".join(manifest.manifest[type_name]))

    console.print(table)
    console.print(
        f"[dim]{manifest.member_count()} member(s), API version {manifest.api_version}[/dim]"
    )


def format_records(records: List[Dict[str, Any]], title: Optional[str] = None) -> None:
    """Display query records as a table

    Columns are taken from the first record, ``type`` excluded.
    """
    if not records:
        console.print("[yellow]No records found[/yellow]")
        return

    columns = [key for key in records[0] if key != "type"]
    table = Table(title=title, box=box.ROUNDED)
    for column in columns:
        table.add_column(column, style="cyan" if column == "Id" else None)

    for record in records:
        table.add_row(*[_cell(record.get(column)) for column in columns])

    console.print(table)
    console.print(f"[dim]{len(records)} record(s)[/dim]")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        # Nested relationship record
        return ", ".join(f"{k}={v}" for k, v in value.items() if k != "type")
    return str(value)


def format_file_list(files: Sequence[str]) -> None:
    """Print one file per line, plain, so the output can be piped"""
    for name in files:
        console.print(name, highlight=False, soft_wrap=True)


def format_deploy_result(job_id: str, check_only: bool = False) -> None:
    """Format and display deploy operation result"""
    action = "Validation" if check_only else "Deployment"
    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] {action} completed successfully!",
        "",
        f"[bold]Id:[/bold] {job_id}",
    ]
    if check_only:
        lines.append("")
        lines.append(f"[dim]Promote with: sfdc-tool deploy --quick {job_id}[/dim]")

    console.print(Panel("\n".join(lines), title="Deploy Result", border_style="green"))


def format_retrieve_result(dest: str, manifest: Manifest) -> None:
    """Format and display retrieve operation result"""
    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Retrieve completed successfully!",
        "",
        f"[bold]Destination:[/bold] {dest}",
        f"[bold]Types:[/bold] {len(manifest.types())}",
        f"[bold]Members:[/bold] {manifest.member_count()}",
    ]
    console.print(Panel("\n".join(lines), title="Retrieve Result", border_style="green"))


def format_apex_result(result: Dict[str, Any], debug_log: Optional[str] = None) -> None:
    """Display the outcome of anonymous Apex"""
    console.print(f"[green]{EMOJI_SUCCESS}[/green] Anonymous Apex executed successfully")
    if debug_log:
        console.print(Panel(debug_log, title="Debug Log", border_style="blue"))


def format_error(error: SFDCToolError) -> None:
    """Display an error panel"""
    lines = [f"[red]{EMOJI_ERROR}[/red] {error}"]
    if error.error_code:
        lines.append(f"[dim]Error code: {error.error_code}[/dim]")

    console.print(Panel("\n".join(lines), title="Error", border_style="red"))

