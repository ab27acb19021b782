# scanner/report.py

import csv
import json
import logging
import os

import pandas as pd
from colorama import init, Fore, Style

# Initialize colorama
init()

logger = logging.getLogger("dkimscan.report")


def output_message(symbol, message, level="info"):
    """Print a message prefixed with a symbol, coloured by level."""
    colors = {
        "good": Fore.GREEN + Style.BRIGHT,
        "warning": Fore.YELLOW + Style.BRIGHT,
        "bad": Fore.RED + Style.BRIGHT,
        "indifferent": Fore.BLUE + Style.BRIGHT,
        "error": Fore.RED + Style.BRIGHT + "!!! ",
        "info": Fore.WHITE + Style.BRIGHT,
    }
    color = colors.get(level, Fore.WHITE + Style.BRIGHT)
    print(color + f"{symbol} {message}" + Style.RESET_ALL)


def print_finding(finding, quiet=False):
    """Print one finding as it is discovered.

    In quiet mode only the public key itself is printed.
    """
    if quiet:
        print(finding.pem)
        return

    output_message("# fqdn:", finding.fqdn, "indifferent")
    output_message("# txt: ", finding.raw_txt)
    output_message("# key: ", finding.key)
    output_message("# size:", f"{finding.bits:4d} bits", "bad" if finding.bits < 1024 else "info")
    output_message("# n:   ", finding.modulus)
    output_message("# e:   ", finding.exponent)
    output_message("# fp:  ", finding.summary, "warning" if finding.mode == "TEST" else "good")
    print()
    print(finding.pem)


def print_candidates(candidates):
    """Dry run: print candidate selectors one per line."""
    count = 0
    for candidate in candidates:
        print(candidate)
        count += 1
    logger.debug("Listed %d candidates", count)
    return count


def output_json(findings):
    """Output findings as JSON to stdout."""
    print(json.dumps([f.to_dict() for f in findings], indent=2))


def write_to_csv(findings, file_name="output.csv"):
    """Writes findings to a CSV file."""
    rows = [f.to_dict() for f in findings]
    if not rows:
        return

    fieldnames = list(rows[0].keys())
    with open(file_name, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def write_to_excel(findings, file_name="output.xlsx"):
    """Writes findings to an Excel file, appending if the file exists."""
    new_df = pd.DataFrame([f.to_dict() for f in findings])
    if os.path.exists(file_name) and os.path.getsize(file_name) > 0:
        existing_df = pd.read_excel(file_name)
        combined_df = pd.concat([existing_df, new_df])
        combined_df.to_excel(file_name, index=False)
    else:
        new_df.to_excel(file_name, index=False)
