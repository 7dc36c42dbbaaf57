"""
Contract Model Objects

The terminal value of the generation pipeline. Everything the renderer prints
is derivable from a ContractModel alone.

These are pure data classes representing:
    - Constructor (merged parameters, base initializers, body)
    - Function (one rendered function, lifecycle or otherwise)
    - ContractModel (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about how they are printed
        - Are immutable
        - Carry resolved decisions, not options to re-interpret
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .options import Options
from .permissions import Permission, PermissionSet
from .registry import ImportRef, Param


class FunctionKind(Enum):
    """Where a generated function comes from; also its render group."""

    PERMISSIONS = "permissions"  # getHookPermissions
    LIFECYCLE = "lifecycle"      # one of the 10 primary hooks
    FEATURE = "feature"          # contributed by a component (pause, setURI, fee stubs)
    SHARES = "shares"            # _mint/_burn supplied by the shares component
    SHARED = "shared"            # joint override of a function defined by several bases


@dataclass(frozen=True)
class Constructor:
    """
    The synthesized constructor.

    Properties:
        params: Merged parameters, deduplicated by name
        initializers: Base initializer calls in linearization order
        body: Statements in linearization order
    """

    params: Tuple[Param, ...] = ()
    initializers: Tuple[str, ...] = ()
    body: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Function:
    """
    A fully composed function.

    Properties:
        name: Function name
        kind: FunctionKind
        params: Rendered parameter declarations
        visibility: public / external / internal
        mutability: None, "view" or "pure"
        overrides: None for no override specifier, () for a plain
            `override`, or the base names for `override(A, B)`
        modifiers: Modifier invocations, e.g. ("onlyOwner",)
        returns: Rendered return declarations
        body: Statements
        permission: The lifecycle permission this function implements
    """

    name: str
    kind: FunctionKind
    params: Tuple[str, ...] = ()
    visibility: str = "internal"
    mutability: Optional[str] = None
    overrides: Optional[Tuple[str, ...]] = ()
    modifiers: Tuple[str, ...] = ()
    returns: Tuple[str, ...] = ()
    body: Tuple[str, ...] = ()
    permission: Optional[Permission] = None


@dataclass(frozen=True)
class ContractModel:
    """
    Root container for one generated hook contract.

    Properties:
        name: Contract identifier
        options: The normalized options the model was built from
        permissions: Resolved permission set
        components: Linearized component ids (including library-only ones)
        parents: Base contracts in declaration order
        imports: Deduplicated, sorted imports
        state: Using-directives and state variable declarations
        constructor: Synthesized constructor
        functions: Composed functions in render order
        license: SPDX license identifier
        security_contact: Optional NatSpec security contact
        registry_version: Version of the component templates used
        notes: Defaults that were applied silently during selection

    INVARIANTS:
        - Exactly one LIFECYCLE function per enabled primary permission
        - Every parent is the base of a component in `components`
    """

    name: str
    options: Options
    permissions: PermissionSet
    components: Tuple[str, ...] = ()
    parents: Tuple[str, ...] = ()
    imports: Tuple[ImportRef, ...] = ()
    state: Tuple[str, ...] = ()
    constructor: Constructor = field(default_factory=Constructor)
    functions: Tuple[Function, ...] = ()
    license: str = "MIT"
    security_contact: Optional[str] = None
    registry_version: str = ""
    notes: Tuple[str, ...] = ()

    def get_function(self, name: str) -> Optional[Function]:
        """
        Retrieve the first function with the given name.

        Args:
            name: Function name

        Returns:
            Function object or None if not found
        """
        for function in self.functions:
            if function.name == name:
                return function
        return None

    def lifecycle_functions(self) -> Tuple[Function, ...]:
        return tuple(f for f in self.functions if f.kind is FunctionKind.LIFECYCLE)
