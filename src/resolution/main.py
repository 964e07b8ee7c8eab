import argparse
import asyncio
import logging
import sys
from typing import Optional
from dotenv import load_dotenv

from resolution.exceptions import ConfigurationError, ResolutionError
from resolution.resolution import Resolution

# Load environment variables
load_dotenv(override=True)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Resolve blockchain domain names")
    parser.add_argument("domain", help="Domain to resolve, e.g. brad.crypto")
    parser.add_argument(
        "--currency", help="Print the address of this currency ticker only"
    )
    parser.add_argument("--record", help="Print the value of this record key only")
    parser.add_argument(
        "--owner", action="store_true", default=False, help="Print the owner only"
    )
    parser.add_argument(
        "--namehash", action="store_true", default=False, help="Print the namehash only"
    )
    parser.add_argument(
        "--api",
        action="store_true",
        default=False,
        help="Resolve through the resolution API instead of the blockchain",
    )
    parser.add_argument(
        "--debug", action="store_true", default=False, help="Enable debug mode"
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> str:
    """Execute the lookup selected by the arguments and format its result"""
    resolution = Resolution(blockchain=not args.api, debug=args.debug)

    if args.namehash:
        return resolution.namehash(args.domain)
    if args.currency:
        return await resolution.address(args.domain, args.currency)
    if args.record:
        return await resolution.record(args.domain, args.record)
    if args.owner:
        return str(await resolution.owner(args.domain))

    response = await resolution.resolve(args.domain)
    return response.model_dump_json(indent=2)


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        print(asyncio.run(run(args)))
    except (ResolutionError, ConfigurationError) as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
