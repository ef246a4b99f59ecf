"""
shellybridge CLI - inspect what the bridge exposes for a set of devices.
"""

import asyncio
import logging
import sys
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .accessories import ACCESSORY_LAYOUTS
from .config import PlatformConfig
from .homekit import BridgeHost, PlatformAccessory
from .platform import ShellyPlatform
from .shellies import MODELS, DeviceDirectory

console = Console()


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()]
    )


def run_async(coro):
    """Run an async function."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        return loop.run_until_complete(coro)


def parse_device(value: str) -> Tuple[str, str, str]:
    """Split a TYPE:ID:HOST argument."""
    parts = value.split(":", 2)
    if len(parts) != 3 or not all(parts):
        raise click.BadParameter(f"expected TYPE:ID:HOST, got {value!r}")
    return parts[0], parts[1], parts[2]


def describe_services(pa: PlatformAccessory) -> str:
    names = [s.display_name for s in pa.services if s.display_name != "AccessoryInformation"]
    return ", ".join(names)


@click.group()
@click.version_option(__version__, prog_name="shellybridge")
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.pass_context
def main(ctx, verbose):
    """Shelly devices as HomeKit bridge accessories."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    setup_logging(verbose)


@main.command()
def models():
    """List supported device models and the accessories they expose."""
    table = Table(title="Supported models")
    table.add_column("Type", style="cyan")
    table.add_column("Model")
    table.add_column("Mode", style="dim")
    table.add_column("Accessory")
    table.add_column("Count", justify="right")

    for (category, mode), layout in ACCESSORY_LAYOUTS.items():
        model = MODELS.get(category.value)
        table.add_row(
            category.value,
            model.label if model else "",
            mode or "-",
            layout.accessory_class.__name__,
            str(layout.channels),
        )

    console.print(table)


@main.command()
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='Bridge config.json or a Shelly platform block')
@click.option('--device', '-d', 'devices', multiple=True, required=True,
              help='Device to announce, as TYPE:ID:HOST (repeatable)')
@click.option('--roller', 'rollers', multiple=True,
              help='ID of a Shelly 2 to put in roller mode (repeatable)')
def preview(config_path: Optional[str], devices: Tuple[str, ...], rollers: Tuple[str, ...]):
    """Announce devices to an in-process bridge and show the resulting accessories."""
    parsed: List[Tuple[str, str, str]] = []
    for value in devices:
        parsed.append(parse_device(value))

    config = PlatformConfig.load(config_path) if config_path else PlatformConfig()

    async def _preview():
        bridge = BridgeHost()
        directory = DeviceDirectory()
        platform = ShellyPlatform(config, bridge, directory)
        bridge.configure_platform(platform)
        bridge.finish_launching()

        try:
            for device_type, device_id, host in parsed:
                device = directory.announce(device_type, device_id, host)
                if device_id in rollers and hasattr(device, "mode"):
                    device.mode = "roller"
        finally:
            await directory.stop()

        return bridge.accessories

    accessories = run_async(_preview())

    table = Table(title=f"{len(accessories)} accessories")
    table.add_column("Name", style="cyan")
    table.add_column("Category")
    table.add_column("Services")
    table.add_column("Context", style="dim")

    for pa in accessories:
        context = " ".join(f"{k}={v}" for k, v in pa.context.items())
        table.add_row(pa.display_name, pa.category_name, describe_services(pa), context)

    console.print(table)

    ignored = [d for d in parsed if d[0] not in MODELS]
    for device_type, device_id, _ in ignored:
        console.print(f"[yellow]Ignored unsupported device {device_type} {device_id}[/yellow]")

    if not accessories:
        sys.exit(1)


if __name__ == '__main__':
    main()
