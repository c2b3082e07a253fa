"""Main CLI entry point with configuration options"""

import sys

import click

from sshfs_volume.cli import commands
from sshfs_volume.config import PluginConfig
from sshfs_volume.exceptions import PluginException
from sshfs_volume.services import VolumeService
from sshfs_volume.utils.logger import get_logger, setup_logging

LOG = get_logger(__name__)


@click.group()
@click.option('--config', 'config_file', help='Configuration file path')
@click.option('--root', help='State and mount root (overrides config)')
@click.option('--log-level',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                                case_sensitive=False),
              help='Log level')
@click.pass_context
def cli(ctx, config_file, root, log_level):
    """SSHFS volume manager CLI"""
    ctx.ensure_object(dict)

    try:
        config = PluginConfig.from_file(config_file)
    except PluginException as e:
        click.echo(f"Error loading config file: {e}", err=True)
        sys.exit(1)

    # Override with CLI arguments
    if root:
        config.root = root
    if log_level:
        config.log_level = log_level.upper()

    setup_logging(config.log_level, config.log_format)

    # A snapshot that cannot be read leaves nothing safe to run with
    try:
        ctx.obj['service'] = VolumeService.from_config(config)
    except PluginException as e:
        LOG.critical(f"Failed to initialize volume registry: {e}")
        click.secho(f"✗ {e}", fg='red', err=True)
        sys.exit(1)

    ctx.obj['config'] = config


@cli.command()
@click.argument('name')
@click.option('--opt', '-o', 'opts', multiple=True,
              help="Create option as key=value, e.g. -o sshcmd=user@host:/path")
@click.pass_context
def create(ctx, name, opts):
    """
    Create a volume

    Example:
      sshfs-volume-cli create data -o sshcmd=user@host:/srv -o port=2222
    """
    commands.create_volume(ctx.obj['service'], name, opts)


@cli.command()
@click.argument('name')
@click.pass_context
def remove(ctx, name):
    """Remove an unmounted volume"""
    commands.remove_volume(ctx.obj['service'], name)


@cli.command()
@click.argument('name')
@click.pass_context
def mount(ctx, name):
    """Mount a volume (adds one consumer)"""
    commands.mount_volume(ctx.obj['service'], name)


@cli.command()
@click.argument('name')
@click.pass_context
def unmount(ctx, name):
    """Unmount a volume (releases one consumer)"""
    commands.unmount_volume(ctx.obj['service'], name)


@cli.command()
@click.argument('name')
@click.pass_context
def path(ctx, name):
    """Print the mount point of a volume"""
    commands.show_path(ctx.obj['service'], name)


@cli.command()
@click.argument('name')
@click.option('--format', '-f',
              type=click.Choice(['table', 'json'], case_sensitive=False),
              default='table',
              help='Output format')
@click.pass_context
def inspect(ctx, name, format):
    """
    Show detailed information about a volume

    Examples:
      sshfs-volume-cli inspect data
      sshfs-volume-cli inspect data --format json
    """
    commands.inspect_volume(ctx.obj['service'], name, format.lower())


@cli.command('list')
@click.option('--format', '-f',
              type=click.Choice(['table', 'json'], case_sensitive=False),
              default='table',
              help='Output format')
@click.pass_context
def list_cmd(ctx, format):
    """List registered volumes"""
    commands.list_volumes(ctx.obj['service'], format.lower())


@cli.command()
@click.pass_context
def capabilities(ctx):
    """Show plugin capabilities"""
    commands.show_capabilities(ctx.obj['service'])


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
