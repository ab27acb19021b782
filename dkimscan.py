#! /usr/bin/env python3

# dkimscan.py
import argparse
import asyncio
import itertools
import logging
import sys
from scanner.archive import SelectorArchive
from scanner.config import load_env_config
from scanner.dkim import ScanSession
from scanner.domain import DomainContext
from scanner.generator import generate
from scanner.keys import KeyInspector
from scanner.pattern import RuleError
from scanner.rules import load_rules
from scanner.scheduler import ScanScheduler
from scanner.transport import DNSTransport
from scanner import report

logger = logging.getLogger("dkimscan")


async def scan_domain(domain, rules, config, emit=None, use_archive=False,
                      transport=None):
    """Scan a domain for DKIM selectors and return the key findings.

    Candidates come from the rules (and the key archive when enabled); each is
    looked up with at most ``config.concurrency`` queries in flight. Findings
    are passed to ``emit`` as they arrive.
    """
    context = DomainContext(domain)
    transport = transport or DNSTransport(config.nameservers, config.timeout)
    session = ScanSession(KeyInspector(), emit)
    scheduler = ScanScheduler(
        transport,
        session.handle_response,
        max_in_flight=config.concurrency,
        retries=config.retries,
    )

    candidates = generate(rules, context)
    if use_archive:
        # The archive API is blocking, keep it off the event loop
        loop = asyncio.get_running_loop()
        known = await loop.run_in_executor(None, SelectorArchive(domain).fetch)
        candidates = itertools.chain(known, candidates)

    await scheduler.run(candidates, domain)
    return session.findings


def main():
    parser = argparse.ArgumentParser(
        description="DKIMScan — discover DKIM selectors for a domain by generating "
        "candidate selectors from template rules and looking up their public keys."
    )
    parser.add_argument("domain", help="Domain to scan, e.g. example.com")
    parser.add_argument(
        "rules",
        nargs="?",
        help="Rule file to generate selectors from (default: built-in rules)",
    )
    parser.add_argument(
        "-o",
        type=str,
        choices=["stdout", "json", "csv", "xls"],
        default="stdout",
        help="Output format: stdout, json, csv or xls (default: stdout).",
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        default=None,
        help="Maximum DNS queries in flight (default: 2048)",
    )
    parser.add_argument(
        "-r",
        "--retries",
        type=int,
        default=None,
        help="Retries per query after a timeout or network error (default: 3)",
    )
    parser.add_argument(
        "-n",
        "--nameserver",
        action="append",
        dest="nameservers",
        help="Recursive resolver to query; repeat for several (default: 1.1.1.1, 1.0.0.1)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Timeout in seconds for a single query attempt (default: 5)",
    )
    parser.add_argument(
        "--archive",
        action="store_true",
        help="Also try selectors known to the public DKIM key archive (archive.prove.email)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the generated candidate selectors instead of scanning",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=None,
        help="Only print the public keys found (same as QUIET=1)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose/debug logging output",
    )

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = load_env_config().override(
        quiet=args.quiet,
        concurrency=args.concurrency,
        retries=args.retries,
        timeout=args.timeout,
        nameservers=args.nameservers,
    )
    if config.concurrency < 1:
        parser.error("--concurrency must be at least 1")

    domain = args.domain.strip().lower().rstrip(".")

    try:
        rules = load_rules(args.rules)
    except OSError as e:
        print(f"Could not open '{args.rules}': {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.list:
            report.print_candidates(generate(rules, DomainContext(domain)))
            return

        emit = None
        if args.o == "stdout":
            emit = lambda finding: report.print_finding(finding, quiet=config.quiet)

        findings = asyncio.run(
            scan_domain(domain, rules, config, emit=emit, use_archive=args.archive)
        )
    except RuleError as e:
        logger.error("Bad rule, aborting: %s", e)
        sys.exit(1)

    if not config.quiet and args.o == "stdout":
        report.output_message("[*]", f"{len(findings)} DKIM key(s) found for {domain}", "info")

    if args.o == "json":
        report.output_json(findings)
    elif args.o == "csv" and findings:
        report.write_to_csv(findings)
        print("Results written to output.csv")
    elif args.o == "xls" and findings:
        report.write_to_excel(findings)
        print("Results written to output.xlsx")


if __name__ == "__main__":
    main()
