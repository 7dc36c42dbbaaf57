"""
Function composition.

Turns the linearized components and the resolved permission set into the
contract's functions:

    - getHookPermissions, declaring all 14 flags
    - one override per enabled primary lifecycle hook; its body is every
      component's contribution for that hook in linearization order, then a
      single terminal return
    - component functions (pause, setURI, fee callbacks), privileged ones
      gated by the active access mechanism
    - _mint/_burn for hook kinds that mint shares
    - joint overrides for functions defined by more than one base

Composition is append-only: a component never removes or reorders another
component's statements.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .components import (
    BALANCE_DELTA,
    BALANCE_DELTA_LIBRARY,
    BEFORE_SWAP_DELTA,
    BEFORE_SWAP_DELTA_LIBRARY,
    HOOKS_LIB,
    MODIFY_LIQUIDITY_PARAMS,
    POOL_KEY,
    SWAP_PARAMS,
)
from .exceptions import RegistryError
from .model import Function, FunctionKind
from .permissions import (
    ALL_PERMISSIONS,
    PRIMARY_PERMISSIONS,
    RETURN_DELTA_FOR,
    Permission,
    PermissionSet,
)
from .registry import Component, FunctionTemplate, HookProfile, ImportRef


@dataclass(frozen=True)
class HookSignature:
    """Parameters, return types and imports of one internal lifecycle hook."""

    params: Tuple[str, ...]
    returns: Tuple[str, ...]
    imports: Tuple[ImportRef, ...]

    @property
    def args(self) -> Tuple[str, ...]:
        return tuple(p.split()[-1] for p in self.params)


_INIT = ("address sender", "PoolKey calldata key", "uint160 sqrtPriceX96")
_MODIFY = ("address sender", "PoolKey calldata key", "ModifyLiquidityParams calldata params")
_AFTER_MODIFY = _MODIFY + ("BalanceDelta delta", "BalanceDelta feesAccrued", "bytes calldata hookData")
_SWAP = ("address sender", "PoolKey calldata key", "SwapParams calldata params")
_DONATE = ("address sender", "PoolKey calldata key", "uint256 amount0", "uint256 amount1", "bytes calldata hookData")

HOOK_SIGNATURES: Dict[Permission, HookSignature] = {
    Permission.BEFORE_INITIALIZE: HookSignature(_INIT, ("bytes4",), (POOL_KEY,)),
    Permission.AFTER_INITIALIZE: HookSignature(_INIT + ("int24 tick",), ("bytes4",), (POOL_KEY,)),
    Permission.BEFORE_ADD_LIQUIDITY: HookSignature(
        _MODIFY + ("bytes calldata hookData",), ("bytes4",), (POOL_KEY, MODIFY_LIQUIDITY_PARAMS)
    ),
    Permission.AFTER_ADD_LIQUIDITY: HookSignature(
        _AFTER_MODIFY, ("bytes4", "BalanceDelta"), (POOL_KEY, MODIFY_LIQUIDITY_PARAMS, BALANCE_DELTA)
    ),
    Permission.BEFORE_REMOVE_LIQUIDITY: HookSignature(
        _MODIFY + ("bytes calldata hookData",), ("bytes4",), (POOL_KEY, MODIFY_LIQUIDITY_PARAMS)
    ),
    Permission.AFTER_REMOVE_LIQUIDITY: HookSignature(
        _AFTER_MODIFY, ("bytes4", "BalanceDelta"), (POOL_KEY, MODIFY_LIQUIDITY_PARAMS, BALANCE_DELTA)
    ),
    Permission.BEFORE_SWAP: HookSignature(
        _SWAP + ("bytes calldata hookData",),
        ("bytes4", "BeforeSwapDelta", "uint24"),
        (POOL_KEY, SWAP_PARAMS, BEFORE_SWAP_DELTA),
    ),
    Permission.AFTER_SWAP: HookSignature(
        _SWAP + ("BalanceDelta delta", "bytes calldata hookData"),
        ("bytes4", "int128"),
        (POOL_KEY, SWAP_PARAMS, BALANCE_DELTA),
    ),
    Permission.BEFORE_DONATE: HookSignature(_DONATE, ("bytes4",), (POOL_KEY,)),
    Permission.AFTER_DONATE: HookSignature(_DONATE, ("bytes4",), (POOL_KEY,)),
}

# Functions that several bases define and that must then be overridden jointly.
SHARED_FUNCTIONS: Dict[str, FunctionTemplate] = {
    "supportsInterface": FunctionTemplate(
        name="supportsInterface",
        params=("bytes4 interfaceId",),
        visibility="public",
        mutability="view",
        returns=("bool",),
        body=("return super.supportsInterface(interfaceId);",),
    ),
}


@dataclass(frozen=True)
class Composition:
    """Functions plus the state declarations and imports they need."""

    functions: Tuple[Function, ...]
    state: Tuple[str, ...]
    imports: Tuple[ImportRef, ...]


def hook_function_name(permission: Permission) -> str:
    return f"_{permission.value}"


def _terminal(permission: Permission, permissions: PermissionSet) -> Tuple[Tuple[str, ...], Tuple[ImportRef, ...]]:
    """Closing statements for a lifecycle hook the base does not implement."""
    selector = f"this.{permission.value}.selector"
    delta = RETURN_DELTA_FOR.get(permission)
    returns_delta = delta is not None and permissions.is_enabled(delta)

    if permission in (Permission.AFTER_ADD_LIQUIDITY, Permission.AFTER_REMOVE_LIQUIDITY):
        if returns_delta:
            return (
                "// Delta taken from (positive) or credited to (negative) the liquidity provider",
                "BalanceDelta hookDelta = BalanceDeltaLibrary.ZERO_DELTA;",
                f"return ({selector}, hookDelta);",
            ), (BALANCE_DELTA_LIBRARY,)
        return (f"return ({selector}, BalanceDeltaLibrary.ZERO_DELTA);",), (BALANCE_DELTA_LIBRARY,)

    if permission is Permission.BEFORE_SWAP:
        if returns_delta:
            return (
                "// Delta on the specified and unspecified currencies owed by the hook",
                "BeforeSwapDelta hookDelta = BeforeSwapDeltaLibrary.ZERO_DELTA;",
                f"return ({selector}, hookDelta, 0);",
            ), (BEFORE_SWAP_DELTA_LIBRARY,)
        return (f"return ({selector}, BeforeSwapDeltaLibrary.ZERO_DELTA, 0);",), (BEFORE_SWAP_DELTA_LIBRARY,)

    if permission is Permission.AFTER_SWAP:
        if returns_delta:
            return (
                "// Amount of the unspecified currency taken (positive) or settled (negative) by the hook",
                "int128 hookDelta = 0;",
                f"return ({selector}, hookDelta);",
            ), ()
        return (f"return ({selector}, 0);",), ()

    return (f"return {selector};",), ()


def compose_hook_function(
    permission: Permission,
    components: Sequence[Component],
    permissions: PermissionSet,
    profile: HookProfile,
) -> Tuple[Function, Tuple[ImportRef, ...]]:
    """
    Build the override for one primary lifecycle hook.

    Returns:
        (Function, imports it needs)
    """
    signature = HOOK_SIGNATURES[permission]
    name = hook_function_name(permission)
    body: List[str] = []
    for component in components:
        body.extend(component.hook_bodies.get(permission, ()))

    imports = signature.imports
    if permission in profile.implemented:
        body.append(f"return super.{name}({', '.join(signature.args)});")
    else:
        terminal, extra = _terminal(permission, permissions)
        body.extend(terminal)
        imports += extra

    function = Function(
        name=name,
        kind=FunctionKind.LIFECYCLE,
        params=signature.params,
        returns=signature.returns,
        body=tuple(body),
        permission=permission,
    )
    return function, imports


def compose_permissions_function(permissions: PermissionSet) -> Function:
    """getHookPermissions, listing every flag of the resolved set."""
    body = ["return Hooks.Permissions({"]
    for index, permission in enumerate(ALL_PERMISSIONS):
        separator = "," if index < len(ALL_PERMISSIONS) - 1 else ""
        value = "true" if permissions.is_enabled(permission) else "false"
        body.append(f"    {permission.value}: {value}{separator}")
    body.append("});")
    return Function(
        name="getHookPermissions",
        kind=FunctionKind.PERMISSIONS,
        visibility="public",
        mutability="pure",
        returns=("Hooks.Permissions memory",),
        body=tuple(body),
    )


def collect_roles(components: Sequence[Component]) -> Tuple[str, ...]:
    """Roles of privileged functions, in order of first appearance."""
    roles: List[str] = []
    for component in components:
        for template in component.functions:
            if template.role and template.role not in roles:
                roles.append(template.role)
    return tuple(roles)


def _from_template(
    template: FunctionTemplate,
    kind: FunctionKind,
    access: Optional[Component],
    owner: str,
) -> Function:
    modifiers: Tuple[str, ...] = ()
    if template.role:
        if access is None or not access.gate:
            raise RegistryError(f"Privileged function {template.name} has no access control to gate it", component=owner)
        modifiers = (access.gate.format(role=template.role),)
    return Function(
        name=template.name,
        kind=kind,
        params=template.params,
        visibility=template.visibility,
        mutability=template.mutability,
        overrides=() if template.override else None,
        modifiers=modifiers,
        returns=template.returns,
        body=template.body,
    )


def compose_functions(
    components: Sequence[Component],
    permissions: PermissionSet,
    profile: HookProfile,
    access: Optional[Component] = None,
    shares: Optional[Component] = None,
) -> Composition:
    """
    Compose every function of the contract.

    Args:
        components: Components in linearization order
        permissions: Resolved permission set
        profile: Profile of the selected hook kind
        access: The selected access-control component, if any
        shares: The selected shares component, if any

    Returns:
        Composition with functions in render order
    """
    functions: List[Function] = [compose_permissions_function(permissions)]
    imports: Set[ImportRef] = {HOOKS_LIB}
    state: List[str] = []

    for component in components:
        state.extend(component.state)

    for permission in PRIMARY_PERMISSIONS:
        if not permissions.is_enabled(permission):
            continue
        function, needed = compose_hook_function(permission, components, permissions, profile)
        functions.append(function)
        imports.update(needed)

    for component in components:
        for template in component.functions:
            functions.append(_from_template(template, FunctionKind.FEATURE, access, component.id))
            imports.update(template.imports)

    if profile.mints_shares and shares is not None:
        for template in shares.share_functions:
            functions.append(_from_template(template, FunctionKind.SHARES, access, shares.id))
            imports.update(template.imports)

    if access is not None and access.grants_roles:
        for role in collect_roles(components):
            state.append(f'bytes32 public constant {role}_ROLE = keccak256("{role}_ROLE");')

    for name, template in SHARED_FUNCTIONS.items():
        bases = tuple(c.base for c in components if c.base and name in c.interfaces)
        if len(bases) > 1:
            shared = _from_template(template, FunctionKind.SHARED, access, name)
            functions.append(replace(shared, overrides=bases))

    return Composition(functions=tuple(functions), state=tuple(state), imports=tuple(sorted(imports)))
