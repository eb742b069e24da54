"""Allow ``python -m spacecompiler``."""

from .cli import main

main()
