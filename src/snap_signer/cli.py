"""
Command-line interface for the SNAP signer
Generates SNAP signatures and reports default key health
"""

import argparse
import sys
import json
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from .version import __version__
from .config import load_settings
from .exceptions import SnapSignerError
from .service import HTTP_OK, SignatureService
from .signing.types import SignatureType

logger = logging.getLogger(__name__)

# CLI flag -> wire payload key
_PAYLOAD_FLAGS = {
    'signature_type': 'signatureRequestType',
    'method': 'method',
    'url': 'url',
    'body': 'body',
    'client_id': 'clientID',
    'timestamp': 'timestamp',
    'access_token': 'accessToken',
    'secret_key': 'secretKey',
}


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='snap-signer',
        description='Generate SNAP signatures (SHA256withRSA and HMAC-SHA512)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'SNAP signer {__version__}'
    )
    parser.add_argument('--config', help='JSON settings file')
    parser.add_argument('--private-key-file', help='Default PEM private key (overrides settings)')
    parser.add_argument('--log-level', help='Logging level (overrides settings)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_generate_parser(subparsers)
    subparsers.add_parser('health', help='Report whether the default private key can be loaded')

    return parser


def setup_generate_parser(subparsers):
    """Setup signature generation subcommand."""
    generate_parser = subparsers.add_parser('generate', help='Generate a SNAP signature')
    generate_parser.add_argument(
        '--request-file',
        help="JSON request payload file ('-' reads stdin); flags override its fields"
    )
    generate_parser.add_argument(
        '--type',
        dest='signature_type',
        choices=[t.value for t in SignatureType],
        help='Signature type'
    )
    generate_parser.add_argument('--method', help='HTTP method')
    generate_parser.add_argument('--url', help='Relative request URL')
    generate_parser.add_argument('--body', help='Request body text')
    generate_parser.add_argument('--client-id', help='Client ID for token signatures')
    generate_parser.add_argument('--timestamp', help='Explicit X-TIMESTAMP value')
    generate_parser.add_argument('--access-token', help='Access token for HMAC signatures')
    generate_parser.add_argument('--secret-key', help='Secret key for HMAC signatures')
    generate_parser.add_argument('--private-key', help='PEM private key file for this request')
    generate_parser.add_argument('--compact', action='store_true', help='Print compact JSON')


def read_payload(args) -> Dict[str, Any]:
    """Build the wire payload from a request file and flags."""
    payload: Dict[str, Any] = {}

    if args.request_file:
        if args.request_file == '-':
            text = sys.stdin.read()
        else:
            with open(args.request_file, 'r', encoding='utf-8') as f:
                text = f.read()
        loaded = json.loads(text)
        if not isinstance(loaded, dict):
            raise ValueError("Request file must contain a JSON object")
        payload.update(loaded)

    for flag, key in _PAYLOAD_FLAGS.items():
        value = getattr(args, flag, None)
        if value is not None:
            payload[key] = value

    if args.private_key:
        with open(args.private_key, 'r', encoding='utf-8') as f:
            payload['privateKey'] = f.read()

    return payload


def print_json(data: Dict[str, Any], compact: bool = False) -> None:
    if compact:
        print(json.dumps(data, separators=(',', ':')))
    else:
        print(json.dumps(data, indent=2))


def handle_generate_command(args, service: SignatureService) -> int:
    """Handle signature generation command."""
    try:
        payload = read_payload(args)
    except (OSError, ValueError, RecursionError) as e:
        print(f"Error reading request: {e}", file=sys.stderr)
        return 1

    status, body = service.generate(payload)
    if status != HTTP_OK:
        print(f"Error: {body['error']}", file=sys.stderr)
        return 1

    print_json(body, args.compact)
    return 0


def handle_health_command(service: SignatureService) -> int:
    """Handle health command."""
    _, body = service.health()
    print_json(body)
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
        if args.private_key_file:
            settings = replace(settings, private_key_path=args.private_key_file)
        if args.log_level:
            settings = replace(settings, log_level=args.log_level)

        logging.basicConfig(
            level=settings.log_level,
            format='%(asctime)s %(levelname)s %(name)s: %(message)s',
            stream=sys.stderr
        )
        logger.debug(f"Using default private key path: {settings.private_key_path}")

        service = SignatureService(settings.create_engine())

        if args.command == 'generate':
            return handle_generate_command(args, service)
        elif args.command == 'health':
            return handle_health_command(service)
        else:
            parser.print_help()
            return 1

    except SnapSignerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
