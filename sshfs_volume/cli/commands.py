"""CLI command implementations"""

import json
import sys
from typing import Dict, Optional, Tuple

import click
from tabulate import tabulate

from sshfs_volume.models import VolumeResponse
from sshfs_volume.services import VolumeService


def parse_option_pairs(pairs: Tuple[str, ...]) -> Dict[str, str]:
    """Turn repeated ``key=value`` (or bare ``key``) arguments into a mapping."""
    options = {}
    for pair in pairs:
        key, _, value = pair.partition('=')
        if not key:
            raise click.BadParameter(f"invalid option {pair!r}", param_hint='-o/--opt')
        options[key] = value
    return options


def _fail(response: VolumeResponse):
    click.secho(f"✗ {response.message}", fg='red', err=True)
    sys.exit(1)


def _emit(response: VolumeResponse, success_msg: Optional[str] = None):
    if not response.success:
        _fail(response)
    click.secho(f"✓ {success_msg or response.message}", fg='green')


def create_volume(service: VolumeService, name: str, pairs: Tuple[str, ...]):
    response = service.create(name, parse_option_pairs(pairs))
    _emit(response, f"{response.message} ({response.mountpoint})" if response.success else None)


def remove_volume(service: VolumeService, name: str):
    _emit(service.remove(name))


def mount_volume(service: VolumeService, name: str):
    response = service.mount(name)
    _emit(response, f"{response.message} at {response.mountpoint}" if response.success else None)


def unmount_volume(service: VolumeService, name: str):
    _emit(service.unmount(name))


def show_path(service: VolumeService, name: str):
    response = service.path(name)
    if not response.success:
        _fail(response)
    click.echo(response.mountpoint)


def inspect_volume(service: VolumeService, name: str, format: str = 'table'):
    """Show detailed information about a volume"""
    response = service.get(name)
    if not response.success:
        _fail(response)

    volume = response.volume
    if format == 'json':
        click.echo(json.dumps(volume, indent=2))
        return

    status = volume['status']
    data = [
        ['Name', volume['name']],
        ['Mount Point', volume['mountpoint']],
        ['Remote Target', status['remote_target']],
        ['Port', status['port'] or 'default'],
        ['Options', ', '.join(status['options']) or 'N/A'],
        ['Password', 'set' if status['authenticated'] else 'N/A'],
        ['Created', volume['created_at'] or 'N/A'],
        ['References', status['reference_count']],
        ['Needs Cleanup', 'yes' if status['needs_cleanup'] else 'no'],
    ]
    click.echo(tabulate(data, tablefmt='grid'))


def list_volumes(service: VolumeService, format: str = 'table'):
    """List registered volumes"""
    response = service.list()
    if not response.success:
        _fail(response)

    volumes = sorted(response.volumes, key=lambda v: v['name'])
    if format == 'json':
        click.echo(json.dumps(volumes, indent=2))
        return

    if not volumes:
        click.echo("No volumes found")
        return

    data = [
        [v['name'], v['mountpoint'], 'yes' if v['needs_cleanup'] else '']
        for v in volumes
    ]
    headers = ['Name', 'Mount Point', 'Needs Cleanup']
    click.echo(tabulate(data, headers=headers, tablefmt='grid'))
    click.echo(f"\nTotal: {len(volumes)} volumes")


def show_capabilities(service: VolumeService):
    capabilities = service.capabilities().capabilities
    click.echo(tabulate(sorted(capabilities.items()), headers=['Capability', 'Value'],
                        tablefmt='grid'))
