#!/usr/bin/env python3
''' fsremote as run via python -m '''

import argparse
import asyncio
import logging
import sys

import fsremote
import fsremote.bootstrap
import fsremote.config
from fsremote.fsapi import FsapiClient, FsapiError, Node, Notification, NotificationListener
from fsremote.fsapi import U8, InvalidData, UnknownNode, lookup


class UsageError(Exception):
    ''' command line that cannot be carried out '''


def _number(text: str) -> int:
    try:
        number = int(text)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f'{text!r} is not a number') from err
    if number < 0:
        raise argparse.ArgumentTypeError(f'{number} is negative')
    return number


def build_parser() -> argparse.ArgumentParser:
    ''' the command line '''
    parser = argparse.ArgumentParser(prog='fsremote',
                                     description='Remote control for Frontier Silicon radios')
    parser.add_argument('--version', action='version', version=f'%(prog)s {fsremote.__version__}')
    parser.add_argument('--host', help='radio host name or address, optionally with :port')
    parser.add_argument('--pin', help='radio PIN')
    parser.add_argument('--config', help='INI file to read settings from')
    parser.add_argument('--verbose', '-v', action='store_true', help='log to stderr')
    parser.add_argument('--logdir', help='also write a rotating debug log into this directory')

    commands = parser.add_subparsers(dest='command', required=True, metavar='COMMAND')
    commands.add_parser('on', help='turn radio on')
    commands.add_parser('off', help='turn radio off')
    commands.add_parser('mute', aliases=['m'], help='mute radio')
    commands.add_parser('unmute', aliases=['M'], help='unmute radio')

    volume = commands.add_parser('volume', aliases=['v'], help='change the volume')
    volumecommands = volume.add_subparsers(dest='volume', required=True, metavar='ACTION')
    setter = volumecommands.add_parser('set', aliases=['s', '='], help='set the volume')
    setter.add_argument('number', type=_number)
    upper = volumecommands.add_parser('up', aliases=['u', '+'], help='increase volume (default 1)')
    upper.add_argument('number', type=_number, nargs='?', default=1)
    downer = volumecommands.add_parser('down',
                                       aliases=['d', '-'],
                                       help='decrease volume (default 1)')
    downer.add_argument('number', type=_number, nargs='?', default=1)

    favorite = commands.add_parser('favorite', aliases=['f'], help='play a stored preset')
    favorite.add_argument('number', type=_number)

    getter = commands.add_parser('get', help='print the value of a node')
    getter.add_argument('node')
    nodesetter = commands.add_parser('set', help='write a value to a node')
    nodesetter.add_argument('node')
    nodesetter.add_argument('value')
    lister = commands.add_parser('list', help='print the items of a list node')
    lister.add_argument('node')
    commands.add_parser('listen', help='print notifications until interrupted')
    return parser


VOLUME_ACTIONS = {
    's': 'set',
    '=': 'set',
    'u': 'up',
    '+': 'up',
    'd': 'down',
    '-': 'down',
}

COMMAND_ALIASES = {
    'm': 'mute',
    'M': 'unmute',
    'v': 'volume',
    'f': 'favorite',
}


def _node(name: str) -> Node:
    try:
        return lookup(name)
    except UnknownNode as err:
        raise UsageError(f'unknown node {name}') from err


async def _current_volume(client: FsapiClient) -> int:
    value = await client.get(Node.SYS_AUDIO_VOLUME)
    if not isinstance(value, U8):
        raise InvalidData(f'volume came back as {value!r}')
    return value.value


async def _volume(client: FsapiClient, action: str, number: int) -> None:
    if action == 'set':
        volume = number
    elif action == 'up':
        volume = await _current_volume(client) + number
    else:
        volume = await _current_volume(client) - number
        if volume < 0:
            raise UsageError(f'cannot go {number} below the current volume')
    await client.set(Node.SYS_AUDIO_VOLUME, volume)


def print_notification(notification: Notification) -> None:
    ''' one line per notification '''
    print(f'{notification.node}: {notification.value}', flush=True)


async def execute(args: argparse.Namespace, client: FsapiClient) -> None:  # pylint: disable=too-many-branches
    ''' carry out one command against the radio '''
    command = COMMAND_ALIASES.get(args.command, args.command)
    if command in ('on', 'off'):
        await client.set(Node.SYS_POWER, int(command == 'on'))
    elif command in ('mute', 'unmute'):
        await client.set(Node.SYS_AUDIO_MUTE, int(command == 'mute'))
    elif command == 'volume':
        await _volume(client, VOLUME_ACTIONS.get(args.volume, args.volume), args.number)
    elif command == 'favorite':
        await client.set(Node.NAV_STATE, 1)
        await client.set(Node.NAV_ACTION_SELECT_PRESET, args.number)
    elif command == 'get':
        print(await client.get(_node(args.node)))
    elif command == 'set':
        await client.set(_node(args.node), args.value)
    elif command == 'list':
        node = _node(args.node)
        await client.create_session()
        for item in await client.get_item_list(node, client.session_id):
            fields = ' '.join(f'{field.name}={field.value}' for field in item.fields)
            print(f'{item.key}: {fields}')
    elif command == 'listen':
        listener = NotificationListener(client, strict=client.strict, callback=print_notification)
        await listener.run()
    else:
        raise UsageError(f'unknown command {args.command}')


async def run(args: argparse.Namespace, config: fsremote.config.ConfigFile) -> None:
    ''' connect and execute '''
    host = args.host or config.host
    if not host:
        raise UsageError('no radio host given; use --host or set radio/host')
    pin = args.pin or config.pin
    async with FsapiClient(host,
                           pin,
                           timeout=config.timeout,
                           notifytimeout=config.notifytimeout,
                           strict=config.strict) as client:
        await execute(args, client)


def main(argv: list[str] | None = None) -> int:
    ''' main entrypoint '''
    parser = build_parser()
    args = parser.parse_args(argv)

    fsremote.bootstrap.set_qt_names()
    config = fsremote.config.ConfigFile(inifile=args.config)
    if args.logdir:
        fsremote.bootstrap.setuplogging(logdir=args.logdir, rotate=True, level=config.loglevel)
    logging.getLogger().setLevel(config.loglevel)
    if args.verbose:
        fsremote.bootstrap.add_stderr_logging(logging.DEBUG)
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        asyncio.run(run(args, config))
    except UsageError as error:
        parser.print_usage(sys.stderr)
        print(f'{parser.prog}: error: {error}', file=sys.stderr)
        return 2
    except FsapiError as error:
        logging.error('%s failed: %s', args.command, error)
        print(f'{parser.prog}: {error.__class__.__name__}: {error}', file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logging.info('interrupted')
    return 0


if __name__ == '__main__':
    sys.exit(main())
