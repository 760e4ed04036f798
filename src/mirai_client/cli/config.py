"""CLI: mirai config set|show|clear"""

from typing import Optional

import click
from rich.console import Console

console = Console()


def _load_config() -> dict:
    from mirai_client.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from mirai_client.cli.main import _save_config
    _save_config(cfg)


@click.group()
def config():
    """Connection settings."""


@config.command("set")
@click.option("--base-url", default=None, help="mirai HTTP API address")
@click.option("--auth-key", default=None, help="authKey from the server's setting.yml")
@click.option("--qq", default=None, type=int, help="Bot account to bind")
def config_set(base_url: Optional[str], auth_key: Optional[str], qq: Optional[int]):
    """Save connection settings, prompting for anything missing."""
    cfg = _load_config()
    cfg["base_url"] = base_url or cfg.get("base_url") or click.prompt("Base URL", default="http://localhost:8080")
    cfg["auth_key"] = auth_key or cfg.get("auth_key") or click.prompt("Auth key", hide_input=True)
    cfg["qq"] = qq or cfg.get("qq") or click.prompt("Bot account", type=int)
    _save_config(cfg)
    console.print("[dim]Settings saved to ~/.mirai/config.json[/dim]")


@config.command("show")
def config_show():
    """Show saved settings (the auth key is masked)."""
    cfg = _load_config()
    if not cfg:
        console.print("[yellow]Not configured. Run `mirai config set`.[/yellow]")
        return
    console.print(f"base_url: {cfg.get('base_url', '')}")
    console.print(f"auth_key: {'*' * len(cfg.get('auth_key', ''))}")
    console.print(f"qq:       {cfg.get('qq', '')}")


@config.command("clear")
def config_clear():
    """Forget saved settings."""
    _save_config({})
    console.print("[green]Settings cleared.[/green]")
