"""Release order for registered resources."""

from enum import Enum


class ReleaseOrder(str, Enum):
    """Order in which a registry releases its resources.

    FIFO releases in exactly the order resources were registered and is the
    default. LIFO releases newest-first like nested ``with`` blocks and is only
    used when asked for explicitly.
    """

    FIFO = "fifo"
    LIFO = "lifo"
