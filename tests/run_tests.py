#!/usr/bin/env python3

"""
Test Runner Script

Provides easy way to run different test suites with proper configuration.
"""

import sys
import subprocess
import argparse
from pathlib import Path

def run_command(cmd: list) -> int:
    """Run command and return exit code"""
    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd)
    return result.returncode

def main():
    parser = argparse.ArgumentParser(description="Run scopegraft tests")

    parser.add_argument(
        "--type",
        choices=["unit", "integration", "e2e", "all"],
        default="all",
        help="Type of tests to run"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    parser.add_argument(
        "--marker", "-m",
        help="Run tests with specific marker (container, introspection)"
    )

    parser.add_argument(
        "--keyword", "-k",
        help="Run tests matching keyword"
    )

    parser.add_argument(
        "--file",
        help="Run specific test file"
    )

    args = parser.parse_args()

    # Base pytest command
    cmd = [sys.executable, "-m", "pytest"]

    # Add test directory or specific file
    if args.file:
        cmd.append(args.file)
    else:
        cmd.append(str(Path(__file__).parent))

    # Add test type markers
    if args.type != "all":
        cmd.extend(["-m", args.type])
    elif args.marker:
        cmd.extend(["-m", args.marker])

    # Add keyword filter
    if args.keyword:
        cmd.extend(["-k", args.keyword])

    # Verbose output
    if args.verbose:
        cmd.append("-v")
    else:
        cmd.append("--tb=short")  # Short traceback format

    cmd.extend([
        "--strict-markers",  # Require markers to be defined
        "--color=yes"
    ])

    # Show test summary
    cmd.append("-ra")

    return run_command(cmd)

if __name__ == "__main__":
    sys.exit(main())
