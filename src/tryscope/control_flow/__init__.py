"""Scoped resource control flow.

Components:
- ResourceRegistry: runs a body and releases the resources it registered
- RecoveryChain: typed catch steps followed by a mandatory finally step
- run_scoped: entry point wiring the two together
- add_suppressed / get_suppressed: suppressed-failure history on exceptions
"""

from .recovery_chain import ChainStage, ChainState, RecoveryChain, resolve_failures
from .resource_registry import ResourceRegistry, ScopeOutcome
from .resources import CallbackResource, ClosingResource, Releasable, is_releasable
from .scoped import run_scoped, using
from .suppression import add_suppressed, get_suppressed

__all__ = [
    "CallbackResource",
    "ChainStage",
    "ChainState",
    "ClosingResource",
    "RecoveryChain",
    "Releasable",
    "ResourceRegistry",
    "ScopeOutcome",
    "add_suppressed",
    "get_suppressed",
    "is_releasable",
    "resolve_failures",
    "run_scoped",
    "using",
]
