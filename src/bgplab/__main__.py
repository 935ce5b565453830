"""Application entry point."""

import argparse
import json
import sys
from typing import Any

import structlog

from bgplab import __version__
from bgplab.config import settings
from bgplab.monitoring.logger import configure_logging
from bgplab.monitoring.sentry_helper import capture_engine_error
from bgplab.protocol.asn import classify, parse_as_number
from bgplab.protocol.subnet import binary_breakdown, compute_subnet, describe_prefix
from bgplab.protocol.types import Outcome
from bgplab.session import LabSession

logger: structlog.BoundLogger | None = None


def run_calc(address: str, prefix: int) -> int:
    """
    Print subnet details for an address and prefix as JSON.

    Returns:
        Process exit code
    """
    subnet = compute_subnet(address, prefix, settings.host_preview_limit)
    breakdown = binary_breakdown(address, prefix)
    if subnet is None or breakdown is None:
        print(f"Invalid address or prefix: {address}/{prefix}", file=sys.stderr)
        return 1

    result: dict[str, Any] = {
        "input": f"{address}/{prefix}",
        "subnet": subnet._asdict(),
        "binary": breakdown._asdict(),
        "use_case": describe_prefix(prefix),
    }
    print(json.dumps(result, indent=2))
    return 0


def run_classify(value: str) -> int:
    """Print the class of an AS number."""
    as_class = classify(parse_as_number(value))
    print(as_class.label)
    return 0


def run_demo(session: LabSession) -> int:
    """
    Walk the reference configuration: iBGP A, iBGP B, eBGP, then one zone.

    Returns:
        0 if every step succeeded, 1 otherwise
    """
    session.set_router_id("A", "1.1.1.1")
    session.set_router_id("B", "2.2.2.2")
    outcomes: list[Outcome[Any]] = [
        session.configure_ibgp("A"),
        session.configure_ibgp("B"),
    ]

    session.set_peering(
        address="192.168.1.0", prefix=session.settings.peering_link_prefix
    )
    outcomes.append(session.configure_ebgp())

    zone = session.zone(1)
    profile = session.profiles[zone.isp_id]
    outcomes.append(session.allocate_zone(zone.zone_id, profile.block, 24))

    for outcome in outcomes:
        print(outcome.message)

    session.stats.log_summary()
    return 0 if all(outcome.ok for outcome in outcomes) else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="bgplab",
        description="IPv4 subnetting and BGP policy validation engine",
    )
    parser.add_argument("--version", action="version", version=__version__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    calc = subparsers.add_parser("calc", help="Compute subnet boundaries")
    calc.add_argument("address", help="IPv4 address, e.g. 192.168.1.100")
    calc.add_argument("prefix", type=int, help="Prefix length (1-30)")

    classify_cmd = subparsers.add_parser("classify", help="Classify an AS number")
    classify_cmd.add_argument("as_number", help="AS number")

    subparsers.add_parser("demo", help="Run the reference BGP walkthrough")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main application entry point."""
    global logger

    args = build_parser().parse_args(argv)

    try:
        logger = configure_logging()
        logger.info(
            "bgplab_starting",
            version=__version__,
            python_version=sys.version.split()[0],
            command=args.command,
            log_level=settings.log_level,
        )

        if args.command == "calc":
            code = run_calc(args.address, args.prefix)
        elif args.command == "classify":
            code = run_classify(args.as_number)
        else:
            code = run_demo(LabSession())

    except Exception as e:
        if logger:
            logger.critical("startup_error", error=str(e), exc_info=True)
            capture_engine_error(args.command, str(e), exception=e)
        else:
            print(f"FATAL: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
