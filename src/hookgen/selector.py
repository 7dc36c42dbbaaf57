"""
Component selection.

Maps normalized options to the set of registry components that make up the
contract, applying the two silent defaults:
    - access control defaults to ownable when a selected feature exposes
      privileged functions
    - hook kinds that mint shares default to ERC6909 shares
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping, Optional, Tuple

from .components import build_default_registry
from .exceptions import ConfigurationError
from .options import (
    AccessKind,
    Options,
    SharesConfig,
    SharesKind,
    parse_hook_kind,
    parse_shares_kind,
)
from .options_keys import MISSING, lookup, parse_flag
from .registry import ComponentRegistry, HookProfile

logger = logging.getLogger(__name__)

DEFAULT_SHARES = SharesKind.ERC6909
DEFAULT_ACCESS = AccessKind.OWNABLE

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class Selection:
    """
    Result of component selection.

    Properties:
        component_ids: Selected components, no duplicates
        access: Effective access mechanism after defaulting
        shares: Effective shares configuration after defaulting
        notes: Human-readable record of applied defaults
    """

    component_ids: FrozenSet[str]
    access: Optional[AccessKind]
    shares: SharesConfig
    notes: Tuple[str, ...] = ()


def _effective_shares_kind(profile: HookProfile, kind: Optional[SharesKind]) -> Optional[SharesKind]:
    if kind is None and profile.shares_required:
        return DEFAULT_SHARES
    return kind


def is_access_control_required(
    options: Options | Mapping[str, Any] | None,
    registry: ComponentRegistry | None = None,
) -> bool:
    """
    Whether the selected features expose privileged functions.

    Works on partial options: missing fields are read as their defaults
    without normalizing the whole record first.

    Args:
        options: Options instance or partial option mapping
        registry: Component registry (defaults to the built-in one)

    Returns:
        True iff the hook kind, pausability or shares module selected by
        these options contributes at least one access-gated function
    """
    if registry is None:
        registry = build_default_registry()
    if options is None:
        options = {}

    if isinstance(options, Options):
        hook, pausable, shares_kind = options.hook, options.pausable, options.shares.kind
    else:
        hook_value = lookup(options, "hook")
        hook = parse_hook_kind("BaseHook" if hook_value is MISSING else hook_value)
        pausable_value = lookup(options, "pausable")
        pausable = pausable_value is not MISSING and parse_flag("pausable", pausable_value)
        shares_value = lookup(options, "shares")
        shares_kind = None
        if shares_value is not MISSING and shares_value:
            if isinstance(shares_value, SharesConfig):
                shares_kind = shares_value.kind
            else:
                kind_value = lookup(shares_value, "options")
                shares_kind = parse_shares_kind(None if kind_value is MISSING else kind_value)

    profile = registry.hook_profile(hook)
    candidates = [profile.component]
    if pausable:
        candidates.append(registry.pausable)
    shares_kind = _effective_shares_kind(profile, shares_kind)
    if shares_kind is not None:
        candidates.append(registry.shares[shares_kind])
    return any(registry.get(c).requires_access for c in candidates)


def _validate_shares(profile: HookProfile, shares: SharesConfig) -> None:
    kind = shares.kind
    if kind is None:
        return
    if kind not in profile.shares_allowed:
        if profile.shares_allowed:
            allowed = ", ".join(sorted(k.value for k in profile.shares_allowed))
            requirement = f"{profile.kind.value} supports only {allowed} shares, got {kind.value}"
        else:
            requirement = f"{profile.kind.value} does not support a shares module"
        raise ConfigurationError("shares.options", requirement)
    if kind is SharesKind.ERC20:
        if not (shares.name or "").strip():
            raise ConfigurationError("shares.name", "ERC20 shares require a non-empty name")
        if not (shares.symbol or "").strip():
            raise ConfigurationError("shares.symbol", "ERC20 shares require a non-empty symbol")
    if kind is SharesKind.ERC1155 and not (shares.uri or "").strip():
        raise ConfigurationError("shares.uri", "ERC1155 shares require a non-empty uri")


def _check_text(field: str, value: Optional[str]) -> None:
    """Values rendered into string literals and comments must stay on one line."""
    if value is not None and _CONTROL_RE.search(value):
        raise ConfigurationError(field, f"must not contain control characters, got {value!r}")


def validate_options(options: Options, registry: ComponentRegistry | None = None) -> None:
    """Raise ConfigurationError for options that cannot produce a contract."""
    if registry is None:
        registry = build_default_registry()
    if not _IDENTIFIER_RE.fullmatch(options.name):
        raise ConfigurationError("name", f"{options.name!r} is not a valid contract identifier")
    offset = options.inputs.block_number_offset
    if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
        raise ConfigurationError("inputs.blockNumberOffset", f"must be a non-negative integer, got {offset!r}")
    _check_text("info.license", options.info.license)
    _check_text("info.securityContact", options.info.security_contact)
    for key in ("name", "symbol", "uri"):
        _check_text(f"shares.{key}", getattr(options.shares, key))
    profile = registry.hook_profile(options.hook)
    _validate_shares(profile, options.shares)


def select_components(options: Options, registry: ComponentRegistry | None = None) -> Selection:
    """
    Select the components for a normalized options record.

    Raises:
        ConfigurationError: shares option incompatible with the hook kind,
            or missing the shares module's required fields
    """
    if registry is None:
        registry = build_default_registry()
    validate_options(options, registry)
    profile = registry.hook_profile(options.hook)
    notes = []

    selected = [profile.component]

    shares = options.shares
    if shares.kind is None and profile.shares_required:
        shares = SharesConfig(kind=DEFAULT_SHARES)
        notes.append(f"{profile.kind.value} mints shares; defaulted shares to {DEFAULT_SHARES.value}")
        _validate_shares(profile, shares)
    if shares.kind is not None:
        selected.append(registry.shares[shares.kind])

    if options.pausable:
        selected.append(registry.pausable)

    for option_name, component_id in registry.utilities.items():
        if getattr(options, option_name):
            selected.append(component_id)

    access = options.access
    if access is None and is_access_control_required(options, registry):
        access = DEFAULT_ACCESS
        notes.append(f"Privileged functions require access control; defaulted access to {DEFAULT_ACCESS.value}")
    if access is not None:
        selected.append(registry.access[access])

    logger.debug("Selected components for %s: %s", options.name, ", ".join(selected))
    return Selection(component_ids=frozenset(selected), access=access, shares=shares, notes=tuple(notes))
