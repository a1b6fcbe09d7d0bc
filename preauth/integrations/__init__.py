"""Rule configuration and request tracking collaborators."""

from .rule_store import (
    RuleStore,
    RuleSnapshot,
    get_rule_store,
)

from .request_store import (
    RequestStore,
    get_request_store,
)

__all__ = [
    "RuleStore",
    "RuleSnapshot",
    "get_rule_store",
    "RequestStore",
    "get_request_store",
]
