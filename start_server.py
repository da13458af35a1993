#!/usr/bin/env python3

"""
scopegraft Web Server Launcher

Runs the host from a source checkout, passing any arguments through to
``scopegraft.program.main``.
"""

import sys
from pathlib import Path

# Add current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from scopegraft.program import main

if __name__ == "__main__":
    print("scopegraft web host")
    print("=" * 50)

    argv = sys.argv[1:]
    if "--content-root" not in argv:
        argv += ["--content-root", str(current_dir)]

    print("  - Home page:        http://localhost:8000/")
    print("  - Registrations:    http://localhost:8000/?DEBUG")
    print("  - Health check:     http://localhost:8000/health")
    print()

    try:
        sys.exit(main(argv))
    except KeyboardInterrupt:
        print("\nServer stopped by user")
