"""
Component registry.

A component is a read-only template: the base contract it contributes (if any),
the components it must be ordered after, its imports, its constructor
contribution, the statements it adds to lifecycle hooks and any extra
functions it brings along.

The registry is built once and injected into the pipeline. Nothing in the
pipeline mutates it, so tests can hand in a small fixture registry instead of
the built-in one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from .exceptions import RegistryError
from .options import AccessKind, HookKind, SharesKind
from .permissions import Permission


class Tier(IntEnum):
    """Tie-break priority used when two components have no ordering constraint."""

    HOOK = 0
    ACCESS = 1
    PAUSABLE = 2
    SHARES = 3
    UTILITY = 4


@dataclass(frozen=True, order=True)
class ImportRef:
    """A named import: `import {symbol} from "path";`"""

    path: str
    symbol: str


@dataclass(frozen=True)
class Param:
    """A constructor parameter."""

    type: str
    name: str

    def render(self) -> str:
        return f"{self.type} {self.name}"


@dataclass(frozen=True)
class FunctionTemplate:
    """
    A non-lifecycle function contributed by a component.

    Properties:
        name: Function name
        params: Rendered parameter declarations, e.g. "PoolKey calldata key"
        visibility: public / external / internal
        mutability: None, "view" or "pure"
        returns: Rendered return declarations
        body: Statements
        override: Whether the function overrides an inherited virtual
        role: When set, the function is privileged and gated by the active
            access-control mechanism using this role name (e.g. "PAUSER")
        imports: Imports the signature or body needs
    """

    name: str
    params: Tuple[str, ...] = ()
    visibility: str = "internal"
    mutability: Optional[str] = None
    returns: Tuple[str, ...] = ()
    body: Tuple[str, ...] = ()
    override: bool = True
    role: Optional[str] = None
    imports: Tuple[ImportRef, ...] = ()


@dataclass(frozen=True)
class Component:
    """
    Static, versioned descriptor of one building block.

    Properties:
        id: Registry key
        tier: Tie-break tier for linearization
        base: Contract name inherited by the generated hook, or None for
            library-only components (utilities)
        parents: Component ids that must be linearized before this one;
            they are pulled in automatically
        imports: Imports this component needs
        ctor_params: Constructor parameters this component declares
        ctor_init: Base initializer call, may use {name} {symbol} {uri}
            {blockNumberOffset} placeholders
        ctor_body: Statements appended to the constructor body
        state: Declarations placed at the top of the contract body
        hook_bodies: Statements contributed to primary lifecycle hooks
        functions: Extra functions always contributed
        share_functions: Functions contributed only when the hook kind
            mints shares through this component
        interfaces: Public functions defined by the base that collide with
            other bases and must be overridden jointly
        gate: Modifier template guarding privileged functions (access
            components only); may use {role}
        grants_roles: Whether privileged functions get their own role
            constant, constructor parameter and grant
    """

    id: str
    tier: Tier
    base: Optional[str] = None
    parents: Tuple[str, ...] = ()
    imports: Tuple[ImportRef, ...] = ()
    ctor_params: Tuple[Param, ...] = ()
    ctor_init: Optional[str] = None
    ctor_body: Tuple[str, ...] = ()
    state: Tuple[str, ...] = ()
    hook_bodies: Mapping[Permission, Tuple[str, ...]] = field(default_factory=dict)
    functions: Tuple[FunctionTemplate, ...] = ()
    share_functions: Tuple[FunctionTemplate, ...] = ()
    interfaces: Tuple[str, ...] = ()
    gate: Optional[str] = None
    grants_roles: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "hook_bodies", MappingProxyType(dict(self.hook_bodies)))

    @property
    def requires_access(self) -> bool:
        """True when this component exposes at least one privileged function."""
        return any(f.role for f in self.functions)


@dataclass(frozen=True)
class HookProfile:
    """
    What a hook kind requires beyond its component.

    Properties:
        kind: The hook kind
        component: Id of the component carrying the base contract
        permissions: Intrinsic permission requirement
        implemented: Lifecycle hooks the base contract already implements;
            generated overrides delegate to `super`
        shares_required: Whether a shares module is mandatory
        shares_allowed: Shares standards the hook kind accepts
        mints_shares: Whether the base mints/burns shares through
            `_mint`/`_burn` hooks that the shares component must fill in
    """

    kind: HookKind
    component: str
    permissions: FrozenSet[Permission] = frozenset()
    implemented: FrozenSet[Permission] = frozenset()
    shares_required: bool = False
    shares_allowed: FrozenSet[SharesKind] = frozenset(SharesKind)
    mints_shares: bool = False


class ComponentRegistry:
    """
    Read-only index of components and hook profiles.

    Raises RegistryError on construction if ids are duplicated or refer to
    components that do not exist.
    """

    def __init__(
        self,
        components: Iterable[Component],
        hooks: Iterable[HookProfile],
        access: Mapping[AccessKind, str],
        shares: Mapping[SharesKind, str],
        utilities: Mapping[str, str],
        pausable: str,
        version: str = "",
    ) -> None:
        self._components: Dict[str, Component] = {}
        self._order: Dict[str, int] = {}
        for component in components:
            if component.id in self._components:
                raise RegistryError(f"Duplicate component id: {component.id}", component=component.id)
            self._order[component.id] = len(self._components)
            self._components[component.id] = component

        self._hooks: Dict[HookKind, HookProfile] = {}
        for profile in hooks:
            if profile.kind in self._hooks:
                raise RegistryError(f"Duplicate hook profile: {profile.kind.value}", component=profile.component)
            self._hooks[profile.kind] = profile

        self.access: Mapping[AccessKind, str] = MappingProxyType(dict(access))
        self.shares: Mapping[SharesKind, str] = MappingProxyType(dict(shares))
        self.utilities: Mapping[str, str] = MappingProxyType(dict(utilities))
        self.pausable = pausable
        self.version = version
        self._check_references()

    def _check_references(self) -> None:
        referenced = [p.component for p in self._hooks.values()]
        referenced += list(self.access.values()) + list(self.shares.values())
        referenced += list(self.utilities.values()) + [self.pausable]
        for component in self._components.values():
            for parent in component.parents:
                if parent not in self._components:
                    raise RegistryError(
                        f"Component {component.id} declares unknown parent {parent}", component=component.id
                    )
        for component_id in referenced:
            if component_id not in self._components:
                raise RegistryError(f"Unknown component id: {component_id}", component=component_id)

    def get(self, component_id: str) -> Component:
        try:
            return self._components[component_id]
        except KeyError:
            raise RegistryError(f"Unknown component id: {component_id}", component=component_id) from None

    def hook_profile(self, kind: HookKind) -> HookProfile:
        try:
            return self._hooks[kind]
        except KeyError:
            raise RegistryError(f"No hook profile registered for {kind.value}") from None

    def declaration_index(self, component_id: str) -> int:
        """Position of the component in registry declaration order."""
        return self._order[component_id]
