"""tryscope: scoped resource release with typed recovery chains.

Run a body that acquires releasable resources, release every one of them
however the body ends, then route the failure through typed catch handlers
and a mandatory finally step:

    from tryscope import run_scoped

    run_scoped(body).catch(ValueError, on_bad_value).finally_(cleanup)
"""

from .base_exceptions import TryscopeException
from .config import ReleaseOrder, TryscopeSettings, get_settings
from .control_flow import (
    CallbackResource,
    ChainStage,
    ChainState,
    ClosingResource,
    RecoveryChain,
    Releasable,
    ResourceRegistry,
    ScopeOutcome,
    add_suppressed,
    get_suppressed,
    run_scoped,
    using,
)
from .exceptions import (
    ChainConsumedError,
    InvalidCatchTypeError,
    InvalidResourceError,
    RegistryClosedError,
)

__version__ = "0.1.0"

__all__ = [
    "CallbackResource",
    "ChainConsumedError",
    "ChainStage",
    "ChainState",
    "ClosingResource",
    "InvalidCatchTypeError",
    "InvalidResourceError",
    "RecoveryChain",
    "RegistryClosedError",
    "Releasable",
    "ReleaseOrder",
    "ResourceRegistry",
    "ScopeOutcome",
    "TryscopeException",
    "TryscopeSettings",
    "add_suppressed",
    "get_settings",
    "get_suppressed",
    "run_scoped",
    "using",
]
