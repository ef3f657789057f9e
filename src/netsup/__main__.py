"""Allow `python -m netsup`."""

from netsup.cli import main

main()
