"""Navigator configuration.

NavigatorConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NavigatorConfig:
    """Navigator configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = NavigatorConfig(home_name="/home", address_prefix="#")
    """

    # Route name of the bottom (home) entry; reserved in the route table
    home_name: str = "/"

    # Address sync
    sync_address: bool = True
    address_prefix: str = ""  # e.g. "#" for hash-based addresses

    # Events
    event_queue_size: int = 256  # Per async subscriber; overflow is dropped

    # Log every navigation at INFO on the "roost.navigator" logger
    lifecycle_logging: bool = False
