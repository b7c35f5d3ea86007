"""Allow running the package with ``python -m procurement_ai``."""

from procurement_ai.cli import main

main()
