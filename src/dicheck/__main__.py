"""Allow `python -m dicheck`."""

from dicheck.presentation.cli import main

main()
