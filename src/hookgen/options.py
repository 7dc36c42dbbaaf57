"""
Generation options and their normalization.

An options record is what a front end collects from a user: hook kind,
feature toggles, permissions and metadata. Every field is optional on input;
`normalize_options` fills each one with its documented default and returns an
immutable `Options`.

Input mappings use the camelCase option schema (`currencySettler`,
`shares.options`, `inputs.blockNumberOffset`, `info.securityContact`);
snake_case spellings are accepted as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .exceptions import ConfigurationError
from .options_keys import MISSING, lookup, parse_flag, to_snake
from .permissions import PermissionSet

logger = logging.getLogger(__name__)


class HookKind(Enum):
    """The 12 hook behaviors. Each maps to exactly one base component."""

    BASE_HOOK = "BaseHook"
    BASE_ASYNC_SWAP = "BaseAsyncSwap"
    BASE_CUSTOM_ACCOUNTING = "BaseCustomAccounting"
    BASE_CUSTOM_CURVE = "BaseCustomCurve"
    BASE_DYNAMIC_FEE = "BaseDynamicFee"
    BASE_OVERRIDE_FEE = "BaseOverrideFee"
    BASE_DYNAMIC_AFTER_FEE = "BaseDynamicAfterFee"
    BASE_HOOK_FEE = "BaseHookFee"
    ANTI_SANDWICH_HOOK = "AntiSandwichHook"
    LIMIT_ORDER_HOOK = "LimitOrderHook"
    LIQUIDITY_PENALTY_HOOK = "LiquidityPenaltyHook"
    RE_HYPOTHECATION_HOOK = "ReHypothecationHook"


class AccessKind(Enum):
    """Access-control mechanisms. "Disabled" is represented by None."""

    OWNABLE = "ownable"
    ROLES = "roles"
    MANAGED = "managed"


class SharesKind(Enum):
    """Token standards available for representing shares."""

    ERC20 = "ERC20"
    ERC6909 = "ERC6909"
    ERC1155 = "ERC1155"


@dataclass(frozen=True)
class SharesConfig:
    """
    Shares token configuration.

    Properties:
        kind: Token standard, or None when no shares module is wanted
        name: Token name (ERC20 only)
        symbol: Token symbol (ERC20 only)
        uri: Metadata URI (ERC1155 only)
    """

    kind: Optional[SharesKind] = None
    name: Optional[str] = None
    symbol: Optional[str] = None
    uri: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"options": self.kind.value if self.kind else False}
        for key in ("name", "symbol", "uri"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        return d


@dataclass(frozen=True)
class HookInputs:
    """Numeric inputs consumed by specific hook kinds."""

    block_number_offset: int = 10

    def to_dict(self) -> Dict[str, Any]:
        return {"blockNumberOffset": self.block_number_offset}


@dataclass(frozen=True)
class Info:
    """Contract metadata rendered into the header and NatSpec."""

    license: str = "MIT"
    security_contact: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"license": self.license}
        if self.security_contact:
            d["securityContact"] = self.security_contact
        return d


@dataclass(frozen=True)
class Options:
    """
    Fully populated generation options.

    Built by `normalize_options`; never mutated afterwards.
    """

    hook: HookKind = HookKind.BASE_HOOK
    name: str = "MyHook"
    pausable: bool = False
    access: Optional[AccessKind] = None
    currency_settler: bool = False
    safe_cast: bool = False
    transient_storage: bool = False
    shares: SharesConfig = field(default_factory=SharesConfig)
    permissions: PermissionSet = field(default_factory=PermissionSet)
    inputs: HookInputs = field(default_factory=HookInputs)
    info: Info = field(default_factory=Info)

    def to_dict(self) -> Dict[str, Any]:
        """Plain camelCase mapping; `normalize_options(o.to_dict()) == o`."""
        return {
            "hook": self.hook.value,
            "name": self.name,
            "pausable": self.pausable,
            "access": self.access.value if self.access else False,
            "currencySettler": self.currency_settler,
            "safeCast": self.safe_cast,
            "transientStorage": self.transient_storage,
            "shares": self.shares.to_dict(),
            "permissions": self.permissions.to_dict(),
            "inputs": self.inputs.to_dict(),
            "info": self.info.to_dict(),
        }


defaults = Options()

OptionsLike = Union[Options, Mapping[str, Any], None]

_KNOWN_KEYS = {
    "hook", "name", "pausable", "access", "currencySettler", "safeCast",
    "transientStorage", "shares", "permissions", "inputs", "info",
}
_KNOWN_KEYS |= {to_snake(k) for k in _KNOWN_KEYS}


def defaults_dict() -> Dict[str, Any]:
    """The default options as a plain mapping, suitable for `{**defaults_dict(), "name": "X"}`."""
    return defaults.to_dict()


def parse_hook_kind(value: Any) -> HookKind:
    if isinstance(value, HookKind):
        return value
    try:
        return HookKind(value)
    except ValueError:
        valid = ", ".join(k.value for k in HookKind)
        raise ConfigurationError("hook", f"unknown hook kind {value!r} (expected one of: {valid})") from None


def parse_access_kind(value: Any) -> Optional[AccessKind]:
    if value is None or value is False:
        return None
    if isinstance(value, AccessKind):
        return value
    try:
        return AccessKind(value)
    except ValueError:
        raise ConfigurationError(
            "access", f"unknown access mechanism {value!r} (expected ownable, roles, managed or false)"
        ) from None


def parse_shares_kind(value: Any) -> Optional[SharesKind]:
    if value is None or value is False:
        return None
    if isinstance(value, SharesKind):
        return value
    try:
        return SharesKind(value)
    except ValueError:
        raise ConfigurationError(
            "shares.options", f"unknown shares standard {value!r} (expected ERC20, ERC6909, ERC1155 or false)"
        ) from None


def _normalize_shares(value: Any) -> SharesConfig:
    if value is MISSING or value is None or value is False:
        return SharesConfig()
    if isinstance(value, SharesConfig):
        return value if value.kind else SharesConfig()
    kind_value = lookup(value, "options")
    kind = parse_shares_kind(None if kind_value is MISSING else kind_value)
    if kind is None:
        return SharesConfig()

    def _opt(key: str) -> Optional[str]:
        v = lookup(value, key)
        return None if v is MISSING or v is None else str(v)

    return SharesConfig(kind=kind, name=_opt("name"), symbol=_opt("symbol"), uri=_opt("uri"))


def _normalize_inputs(value: Any) -> HookInputs:
    if value is MISSING or value is None:
        return HookInputs()
    if isinstance(value, HookInputs):
        return value
    offset = lookup(value, "blockNumberOffset")
    if offset is MISSING:
        return HookInputs()
    return HookInputs(block_number_offset=offset)


def _normalize_info(value: Any) -> Info:
    if value is MISSING or value is None:
        return Info()
    if isinstance(value, Info):
        return value
    license_ = lookup(value, "license")
    contact = lookup(value, "securityContact")
    return Info(
        license=Info().license if license_ is MISSING or not license_ else str(license_),
        security_contact=None if contact is MISSING or not contact else str(contact),
    )


def normalize_options(options: OptionsLike = None) -> Options:
    """
    Fill every unset option with its default.

    Args:
        options: None, an Options instance (returned unchanged), or a partial
            mapping in the option schema

    Returns:
        Fully populated, immutable Options

    Raises:
        ConfigurationError: only when a value cannot be interpreted at all
            (an unknown hook kind string, or a non-boolean flag)
    """
    if options is None:
        return defaults
    if isinstance(options, Options):
        return options

    unknown = sorted(k for k in options if k not in _KNOWN_KEYS)
    if unknown:
        logger.debug("Ignoring unknown option keys: %s", ", ".join(unknown))

    def get(key: str, default: Any) -> Any:
        value = lookup(options, key)
        return default if value is MISSING else value

    name = get("name", defaults.name)
    return Options(
        hook=parse_hook_kind(get("hook", defaults.hook)),
        name=defaults.name if name is None else str(name),
        pausable=parse_flag("pausable", get("pausable", False)),
        access=parse_access_kind(get("access", None)),
        currency_settler=parse_flag("currencySettler", get("currencySettler", False)),
        safe_cast=parse_flag("safeCast", get("safeCast", False)),
        transient_storage=parse_flag("transientStorage", get("transientStorage", False)),
        shares=_normalize_shares(lookup(options, "shares")),
        permissions=PermissionSet.from_mapping(get("permissions", None)),
        inputs=_normalize_inputs(lookup(options, "inputs")),
        info=_normalize_info(lookup(options, "info")),
    )
