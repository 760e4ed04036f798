"""CLI: mirai send friend|group|temp, mirai events, mirai recall"""

import json

import click
from rich.console import Console
from rich.markup import escape

from mirai_client.models.events import FriendMessage, GroupMessage, TempMessage

console = Console()


def _get_session():
    from mirai_client.cli.main import _get_session
    return _get_session()


@click.group()
def send():
    """Send a text message."""


@send.command("friend")
@click.argument("target", type=int)
@click.argument("text")
@click.option("--quote", type=int, default=None, help="Message id to quote")
def send_friend(target, text, quote):
    """Send TEXT to friend TARGET."""
    with _get_session() as session:
        message_id = session.send_friend_message(target, text, quote=quote)
    console.print(f"[green]Sent (message id {message_id})[/green]")


@send.command("group")
@click.argument("target", type=int)
@click.argument("text")
@click.option("--quote", type=int, default=None, help="Message id to quote")
def send_group(target, text, quote):
    """Send TEXT to group TARGET."""
    with _get_session() as session:
        message_id = session.send_group_message(target, text, quote=quote)
    console.print(f"[green]Sent (message id {message_id})[/green]")


@send.command("temp")
@click.argument("qq", type=int)
@click.argument("group", type=int)
@click.argument("text")
def send_temp(qq, group, text):
    """Send TEXT privately to member QQ of GROUP."""
    with _get_session() as session:
        message_id = session.send_temp_message(qq, group, text)
    console.print(f"[green]Sent (message id {message_id})[/green]")


def _describe(event) -> str:
    if isinstance(event, FriendMessage):
        return f"[cyan]{event.sender.nickname or event.sender.id}[/cyan]: {escape(event.message.text)}"
    if isinstance(event, (GroupMessage, TempMessage)):
        who = event.sender.member_name or event.sender.id
        return f"[cyan]{who}@{event.sender.group.name or event.sender.group.id}[/cyan]: {escape(event.message.text)}"
    details = event.model_dump_json(by_alias=True, exclude={"type"})
    return f"[dim]{escape(details)}[/dim]"


@click.command("events")
@click.option("-n", "--count", default=10, type=int)
@click.option("--peek", is_flag=True, help="Leave the events queued on the server.")
@click.option("--latest", is_flag=True, help="Newest events first.")
@click.option("--json-output", "--json", is_flag=True)
def events(count, peek, latest, json_output):
    """Fetch queued events."""
    with _get_session() as session:
        if peek:
            result = session.peek_latest_events(count) if latest else session.peek_events(count)
        else:
            result = session.fetch_latest_events(count) if latest else session.fetch_events(count)
    for event in result:
        if json_output:
            click.echo(json.dumps(event.model_dump(mode="json", by_alias=True), ensure_ascii=False))
        else:
            console.print(f"[bold]{event.type}[/bold] {_describe(event)}")
    if not result and not json_output:
        console.print("[dim]No events.[/dim]")


@click.command("recall")
@click.argument("message_id", type=int)
def recall(message_id):
    """Recall a message the bot sent."""
    with _get_session() as session:
        session.recall(message_id)
    console.print(f"[green]Message {message_id} recalled.[/green]")
