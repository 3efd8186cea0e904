"""Allow ``python -m slotbook``."""

from slotbook.cli import main

main()
