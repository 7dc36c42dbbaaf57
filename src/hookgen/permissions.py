"""
Lifecycle permissions and their resolution.

A hook declares 14 permission flags. Ten are "primary" lifecycle points
(before/after initialize, add-liquidity, remove-liquidity, swap, donate); the
remaining four let the hook return a balance delta and each depends on one
primary flag.

The resolver is a monotone closure: rules only ever turn flags on, so the
order in which they fire does not matter.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Tuple

from .options_keys import lookup, MISSING, parse_flag


class Permission(Enum):
    """The 14 hook permissions, valued by their name in `Hooks.Permissions`."""

    BEFORE_INITIALIZE = "beforeInitialize"
    AFTER_INITIALIZE = "afterInitialize"
    BEFORE_ADD_LIQUIDITY = "beforeAddLiquidity"
    AFTER_ADD_LIQUIDITY = "afterAddLiquidity"
    BEFORE_REMOVE_LIQUIDITY = "beforeRemoveLiquidity"
    AFTER_REMOVE_LIQUIDITY = "afterRemoveLiquidity"
    BEFORE_SWAP = "beforeSwap"
    AFTER_SWAP = "afterSwap"
    BEFORE_DONATE = "beforeDonate"
    AFTER_DONATE = "afterDonate"
    BEFORE_SWAP_RETURN_DELTA = "beforeSwapReturnDelta"
    AFTER_SWAP_RETURN_DELTA = "afterSwapReturnDelta"
    AFTER_ADD_LIQUIDITY_RETURN_DELTA = "afterAddLiquidityReturnDelta"
    AFTER_REMOVE_LIQUIDITY_RETURN_DELTA = "afterRemoveLiquidityReturnDelta"

    @property
    def attr(self) -> str:
        """Attribute name on PermissionSet (snake_case)."""
        return self.name.lower()

    @property
    def is_return_delta(self) -> bool:
        return self in RETURN_DELTA_PERMISSIONS


# Declaration order of Hooks.Permissions; also the order functions are emitted in.
ALL_PERMISSIONS: Tuple[Permission, ...] = tuple(Permission)

PRIMARY_PERMISSIONS: Tuple[Permission, ...] = ALL_PERMISSIONS[:10]

# return-delta flag -> primary flag it depends on
RETURN_DELTA_PAIRS: Dict[Permission, Permission] = {
    Permission.BEFORE_SWAP_RETURN_DELTA: Permission.BEFORE_SWAP,
    Permission.AFTER_SWAP_RETURN_DELTA: Permission.AFTER_SWAP,
    Permission.AFTER_ADD_LIQUIDITY_RETURN_DELTA: Permission.AFTER_ADD_LIQUIDITY,
    Permission.AFTER_REMOVE_LIQUIDITY_RETURN_DELTA: Permission.AFTER_REMOVE_LIQUIDITY,
}

RETURN_DELTA_PERMISSIONS: Tuple[Permission, ...] = tuple(RETURN_DELTA_PAIRS)

# primary flag -> return-delta flag that modifies its return shape
RETURN_DELTA_FOR: Dict[Permission, Permission] = {p: d for d, p in RETURN_DELTA_PAIRS.items()}

# Pausing guards every entry point that moves funds into or out of the pool.
PAUSABLE_PERMISSIONS: Tuple[Permission, ...] = (
    Permission.BEFORE_SWAP,
    Permission.BEFORE_ADD_LIQUIDITY,
    Permission.BEFORE_REMOVE_LIQUIDITY,
    Permission.BEFORE_DONATE,
)

# Bit positions in a v4 hook address (Hooks.sol): BEFORE_INITIALIZE is bit 13.
PERMISSION_BITS: Dict[Permission, int] = {
    p: 13 - index for index, p in enumerate(ALL_PERMISSIONS)
}


@dataclass(frozen=True)
class PermissionSet:
    """
    Exactly 14 boolean flags, one per Permission.

    Instances are immutable; use `with_enabled` to derive a new set.
    """

    before_initialize: bool = False
    after_initialize: bool = False
    before_add_liquidity: bool = False
    after_add_liquidity: bool = False
    before_remove_liquidity: bool = False
    after_remove_liquidity: bool = False
    before_swap: bool = False
    after_swap: bool = False
    before_donate: bool = False
    after_donate: bool = False
    before_swap_return_delta: bool = False
    after_swap_return_delta: bool = False
    after_add_liquidity_return_delta: bool = False
    after_remove_liquidity_return_delta: bool = False

    def is_enabled(self, permission: Permission) -> bool:
        return getattr(self, permission.attr)

    def enabled(self) -> Tuple[Permission, ...]:
        """Enabled permissions in declaration order."""
        return tuple(p for p in ALL_PERMISSIONS if self.is_enabled(p))

    def with_enabled(self, permissions: Iterable[Permission]) -> "PermissionSet":
        changes = {p.attr: True for p in permissions}
        if not changes:
            return self
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, bool]:
        return {p.value: self.is_enabled(p) for p in ALL_PERMISSIONS}

    @classmethod
    def of(cls, *permissions: Permission) -> "PermissionSet":
        return cls().with_enabled(permissions)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "PermissionSet":
        """Build from a camelCase or snake_case mapping; missing flags default to False."""
        if data is None:
            return cls()
        if isinstance(data, PermissionSet):
            return data
        values = {}
        for p in ALL_PERMISSIONS:
            value = lookup(data, p.value)
            if value is not MISSING:
                values[p.attr] = parse_flag(f"permissions.{p.value}", value)
        return cls(**values)


def resolve_permissions(
    hook_permissions: Iterable[Permission],
    user_permissions: PermissionSet,
    pausable: bool,
) -> PermissionSet:
    """
    Compute the final permission set.

    Args:
        hook_permissions: Permissions intrinsic to the selected hook kind
        user_permissions: Explicit permissions from the options
        pausable: Whether the pausable module is selected

    Returns:
        PermissionSet closed under the dependency rules:
            - every return-delta flag forces its primary flag
            - pausable forces the four fund-moving "before" flags
    """
    resolved = user_permissions.with_enabled(hook_permissions)
    if pausable:
        resolved = resolved.with_enabled(PAUSABLE_PERMISSIONS)

    # No rule enables a return-delta flag, so one pass reaches the fixed point.
    forced = [primary for delta, primary in RETURN_DELTA_PAIRS.items() if resolved.is_enabled(delta)]
    return resolved.with_enabled(forced)


def permission_flags(permissions: PermissionSet) -> int:
    """Encode a permission set as the low 14 bits a v4 hook address must carry."""
    flags = 0
    for p in permissions.enabled():
        flags |= 1 << PERMISSION_BITS[p]
    return flags
