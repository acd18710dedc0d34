from __future__ import annotations

import os
from contextlib import contextmanager
from contextvars import ContextVar, Token
from enum import Enum
from typing import Iterator

from flip.exceptions import FlagValueError

_BOOL_POLICY_ENV = "FLIP_BOOL_POLICY"
_BOOL_POLICY_CONTEXT: ContextVar["BoolPolicy | None"] = ContextVar(
    "flip_bool_policy",
    default=None,
)


class BoolPolicy(str, Enum):
    COERCE = "coerce"
    STRICT = "strict"


def _normalize_policy(policy: BoolPolicy | str) -> BoolPolicy:
    if isinstance(policy, BoolPolicy):
        return policy
    return BoolPolicy(str(policy).strip().lower())


def _bool_policy_from_env() -> BoolPolicy | None:
    raw = os.environ.get(_BOOL_POLICY_ENV)
    if raw is None:
        return None
    value = raw.strip().lower()
    if not value:
        return None
    if value in {"on", "true", "1"}:
        return BoolPolicy.STRICT
    if value in {"off", "false", "0"}:
        return BoolPolicy.COERCE
    return _normalize_policy(value)


def resolve_bool_policy(policy: BoolPolicy | str | None = None) -> BoolPolicy:
    """Return the bool policy in effect.

    Precedence:
    1. explicit `policy`
    2. context policy (`bool_policy_scope(...)`)
    3. `FLIP_BOOL_POLICY`
    4. default `COERCE`
    """
    if policy is not None:
        return _normalize_policy(policy)
    context_policy = _BOOL_POLICY_CONTEXT.get()
    if context_policy is not None:
        return context_policy
    env_policy = _bool_policy_from_env()
    if env_policy is not None:
        return env_policy
    return BoolPolicy.COERCE


def get_bool_policy() -> BoolPolicy:
    return resolve_bool_policy(None)


def set_bool_policy(policy: BoolPolicy | str) -> Token[BoolPolicy | None]:
    return _BOOL_POLICY_CONTEXT.set(_normalize_policy(policy))


def reset_bool_policy(token: Token[BoolPolicy | None]) -> None:
    _BOOL_POLICY_CONTEXT.reset(token)


@contextmanager
def bool_policy_scope(policy: BoolPolicy | str) -> Iterator[None]:
    token = set_bool_policy(policy)
    try:
        yield
    finally:
        reset_bool_policy(token)


def coerce_state(
    value: object,
    *,
    source: str,
    policy: BoolPolicy | str | None = None,
) -> bool:
    """Turn a caller-supplied state into a bool under the active policy."""
    if isinstance(value, bool):
        return value
    if resolve_bool_policy(policy) is BoolPolicy.STRICT:
        raise FlagValueError(
            f"Expected a boolean state for {source}, got {type(value).__name__}.",
            source=source,
            value=value,
        )
    return bool(value)
