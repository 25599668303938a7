"""
Service Bus Management Command-Line Interface

Decode, encode and normalize subscription descriptions from the shell.

Author: LocalZure Contributors
Date: 2025-12-05
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from sbmanagement import __version__
from sbmanagement.addressing import normalize_forward_to_address
from sbmanagement.config import load_codec_config
from sbmanagement.exceptions import ServiceBusError
from sbmanagement.logging_utils import setup_logging
from sbmanagement.models import SubscriptionDescription
from sbmanagement.subscription_codec import SubscriptionDescriptionCodec, normalize_description


@click.group()
@click.version_option(version=__version__, prog_name="sbmanagement")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (overrides configuration)",
)
@click.pass_context
def cli(ctx, config: Optional[Path], log_level: Optional[str]):
    """
    Service Bus subscription description tools.
    
    Convert between subscription Atom XML and JSON, and resolve
    forwarding addresses.
    """
    ctx.ensure_object(dict)
    codec_config = load_codec_config(str(config) if config else None)
    setup_logging((log_level or codec_config.log_level).upper(), codec_config.log_format)
    ctx.obj["config"] = codec_config
    ctx.obj["codec"] = SubscriptionDescriptionCodec.from_config(codec_config)


@cli.command()
@click.argument("xml_file", type=click.File("r"))
@click.option("--topic", "-t", required=True, help="Topic owning the subscription(s)")
@click.option("--feed", is_flag=True, help="Input is a feed of entries")
@click.option("--base-address", "-b", default=None, help="Namespace endpoint for forwarding addresses")
@click.pass_context
def decode(ctx, xml_file, topic: str, feed: bool, base_address: Optional[str]):
    """
    Decode a subscription entry (or feed) and print it as JSON.
    
    Examples:
        sbmanagement decode entry.xml --topic orders
        sbmanagement decode feed.xml --topic orders --feed -b https://myns.servicebus.windows.net
    """
    codec: SubscriptionDescriptionCodec = ctx.obj["codec"]
    base_address = base_address or ctx.obj["config"].base_address
    content = xml_file.read()
    
    try:
        if feed:
            descriptions = codec.parse_collection_from_content(topic, content)
        else:
            descriptions = [codec.parse_from_content(topic, content)]
        
        if base_address:
            for description in descriptions:
                normalize_description(description, base_address)
    except ServiceBusError as e:
        click.echo(f"[ERROR] {e.error_code}: {e.message}", err=True)
        sys.exit(1)
    
    payload = [description.model_dump(mode="json") for description in descriptions]
    click.echo(json.dumps(payload if feed else payload[0], indent=2))


@cli.command()
@click.argument("json_file", type=click.File("r"))
@click.option("--base-address", "-b", default=None, help="Namespace endpoint for forwarding addresses")
@click.pass_context
def encode(ctx, json_file, base_address: Optional[str]):
    """
    Encode a JSON subscription description as an Atom entry.
    
    Examples:
        sbmanagement encode subscription.json
    """
    codec: SubscriptionDescriptionCodec = ctx.obj["codec"]
    base_address = base_address or ctx.obj["config"].base_address
    
    try:
        description = SubscriptionDescription.model_validate_json(json_file.read())
        if base_address:
            normalize_description(description, base_address)
    except ValidationError as e:
        click.echo(f"[ERROR] Invalid subscription description: {e}", err=True)
        sys.exit(1)
    except ServiceBusError as e:
        click.echo(f"[ERROR] {e.error_code}: {e.message}", err=True)
        sys.exit(1)
    
    click.echo(codec.serialize_to_string(description))


@cli.command()
@click.argument("target")
@click.option("--base-address", "-b", default=None, help="Namespace endpoint to resolve against")
@click.pass_context
def normalize(ctx, target: str, base_address: Optional[str]):
    """
    Resolve a forwarding target to an absolute URI.
    
    Examples:
        sbmanagement normalize myqueue -b https://myns.servicebus.windows.net
    """
    base_address = base_address or ctx.obj["config"].base_address
    if not base_address:
        click.echo("[ERROR] A base address is required (--base-address or configuration)", err=True)
        sys.exit(1)
    
    try:
        click.echo(normalize_forward_to_address(target, base_address))
    except ServiceBusError as e:
        logging.getLogger("sbmanagement.cli").debug("Normalization failed", exc_info=True)
        click.echo(f"[ERROR] {e.error_code}: {e.message}", err=True)
        sys.exit(1)


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
