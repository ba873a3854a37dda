"""
Package entry point.

Allows running the application via:

    python -m schoolcal

This simply forwards execution to schoolcal.cli.main().
"""

from schoolcal.cli import main

if __name__ == "__main__":
    main()
