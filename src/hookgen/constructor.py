"""
Constructor synthesis.

Every component may declare constructor parameters, a base initializer and
body statements. They collapse into one constructor: parameters merged by
name, initializers and statements kept in linearization order (the order the
platform runs base constructors in).
"""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Sequence

from .exceptions import RegistryError
from .model import Constructor
from .options import HookInputs, SharesConfig
from .registry import Component, Param


def role_param_name(role: str) -> str:
    """PAUSER -> pauser, URI_SETTER -> uriSetter"""
    head, *rest = role.lower().split("_")
    return head + "".join(part.capitalize() for part in rest)


def _solidity_string(value: str) -> str:
    """Escape a value for use inside a double-quoted string literal."""
    return re.sub(r'(["\\])', r"\\\1", value)


def template_values(shares: SharesConfig, inputs: HookInputs) -> Dict[str, str]:
    """Placeholder values available to component initializers."""
    return {
        "name": _solidity_string(shares.name or ""),
        "symbol": _solidity_string(shares.symbol or ""),
        "uri": _solidity_string(shares.uri or ""),
        "blockNumberOffset": str(inputs.block_number_offset),
    }


def synthesize_constructor(
    components: Sequence[Component],
    values: Mapping[str, str],
    roles: Sequence[str] = (),
) -> Constructor:
    """
    Merge component constructors.

    Args:
        components: Components in linearization order
        values: Placeholder values for initializer templates
        roles: Roles of privileged functions; granted by the access component
            that declares `grants_roles`, each to its own address parameter

    Returns:
        Constructor with parameters deduplicated by name

    Raises:
        RegistryError: two components declare the same parameter name with
            different types
    """
    params: Dict[str, Param] = {}
    initializers: List[str] = []
    body: List[str] = []

    def add_param(param: Param, owner: str) -> None:
        existing = params.get(param.name)
        if existing is not None and existing.type != param.type:
            raise RegistryError(
                f"Constructor parameter {param.name} declared as {existing.type} and {param.type}",
                component=owner,
            )
        params[param.name] = param

    for component in components:
        for param in component.ctor_params:
            add_param(param, component.id)
        if component.ctor_init:
            initializers.append(component.ctor_init.format(**values))
        body.extend(component.ctor_body)
        if component.grants_roles:
            for role in roles:
                name = role_param_name(role)
                add_param(Param("address", name), component.id)
                body.append(f"_grantRole({role}_ROLE, {name});")

    return Constructor(params=tuple(params.values()), initializers=tuple(initializers), body=tuple(body))
