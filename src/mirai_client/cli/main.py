"""
mirai CLI — `mirai` command.

Commands:
  mirai config set|show|clear    Connection settings
  mirai friends|groups           Contact lists
  mirai members <group>          Member list of a group
  mirai send friend|group|temp   Send a text message
  mirai events                   Fetch or peek queued events
  mirai recall <message-id>      Recall a message
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install mirai-client[cli]")

from mirai_client.session import Session
from mirai_client.transport.http import DEFAULT_BASE_URL

console = Console()
CONFIG_FILE = Path.home() / ".mirai" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _resolve_config() -> dict:
    """Saved config with MIRAI_* environment variables taking precedence."""
    cfg = _load_config()
    for key, env in (("base_url", "MIRAI_BASE_URL"), ("auth_key", "MIRAI_AUTH_KEY"), ("qq", "MIRAI_QQ")):
        value: Optional[str] = os.environ.get(env)
        if value:
            cfg[key] = value
    return cfg


def _get_session() -> Session:
    cfg = _resolve_config()
    if not cfg.get("auth_key") or not cfg.get("qq"):
        console.print("[red]Not configured. Run `mirai config set` first.[/red]")
        raise SystemExit(1)
    return Session(
        cfg["auth_key"],
        int(cfg["qq"]),
        base_url=cfg.get("base_url", DEFAULT_BASE_URL),
    )


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log requests to stderr.")
def main(verbose: bool):
    """Drive a mirai bot account over the HTTP API."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register subcommands from separate modules
from mirai_client.cli.config import config
from mirai_client.cli.contacts import friends, groups, members
from mirai_client.cli.messages import send, events, recall

main.add_command(config)
main.add_command(friends)
main.add_command(groups)
main.add_command(members)
main.add_command(send)
main.add_command(events)
main.add_command(recall)


if __name__ == "__main__":
    main()
