"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(options_status=204, strict_slashes=False)
    """

    # Status of synthesized OPTIONS responses
    options_status: int = 200

    # When False, one trailing "/" on the request path is ignored
    strict_slashes: bool = True

    # Percent-decode values bound to dynamic segments
    decode_parameters: bool = True
