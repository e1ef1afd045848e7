#!/usr/bin/env python3
"""
Run the fast tests, or the browser suite with --e2e.

The browser suite needs the Playwright browsers installed (see dev/playwright_install.py).
Set SHOW_BROWSER=1 to watch it run in a visible, slowed-down browser.
"""
import subprocess
import sys


def main():
    """Run the selected tests with nice output."""
    run_e2e = "--e2e" in sys.argv[1:]
    marker = "e2e" if run_e2e else "not e2e"
    print(f"Running tests marked {marker!r}...")
    print("=" * 60)

    cmd = [
        sys.executable, "-m", "pytest",
        "-m", marker,
        "--tb=short",
        "-v"
    ]

    result = subprocess.run(cmd, capture_output=False)
    return result.returncode

if __name__ == "__main__":
    sys.exit(main())
