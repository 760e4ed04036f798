"""CLI: mirai friends|groups|members"""

import json

import click
from rich.console import Console
from rich.table import Table

console = Console()


def _get_session():
    from mirai_client.cli.main import _get_session
    return _get_session()


@click.command("friends")
@click.option("--json-output", "--json", is_flag=True)
def friends(json_output):
    """List the bot's friends."""
    with _get_session() as session:
        result = session.friend_list()
    if json_output:
        click.echo(json.dumps([f.model_dump(mode="json", by_alias=True) for f in result], indent=2, ensure_ascii=False))
        return
    table = Table(title=f"Friends ({len(result)})")
    table.add_column("ID", style="bold")
    table.add_column("Nickname")
    table.add_column("Remark")
    for f in result:
        table.add_row(str(f.id), f.nickname, f.remark)
    console.print(table)


@click.command("groups")
@click.option("--json-output", "--json", is_flag=True)
def groups(json_output):
    """List the groups the bot is in."""
    with _get_session() as session:
        result = session.group_list()
    if json_output:
        click.echo(json.dumps([g.model_dump(mode="json", by_alias=True) for g in result], indent=2, ensure_ascii=False))
        return
    table = Table(title=f"Groups ({len(result)})")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Permission")
    for g in result:
        table.add_row(str(g.id), g.name, g.permission.value)
    console.print(table)


@click.command("members")
@click.argument("group", type=int)
def members(group):
    """List members of GROUP."""
    with _get_session() as session:
        result = session.member_list(group)
    table = Table(title=f"Members of {group} ({len(result)})")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Permission")
    for m in result:
        table.add_row(str(m.id), m.member_name, m.permission.value)
    console.print(table)
