"""Allow ``python -m intent_relay``."""

from intent_relay.cli import main

main()
