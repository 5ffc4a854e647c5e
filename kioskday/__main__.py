"""
Package entry point.

Allows running the application via:

    python -m kioskday

This simply forwards execution to kioskday.cli.main().
"""

from kioskday.cli import main

if __name__ == "__main__":
    main()
