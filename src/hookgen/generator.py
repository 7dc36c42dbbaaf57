"""
Generation pipeline.

    options -> normalize -> resolve permissions -> select components
            -> linearize -> synthesize constructor -> compose functions
            -> ContractModel -> render

Each stage is a pure function of the previous stage's output and the
read-only component registry, so concurrent calls need no coordination.
"""

from __future__ import annotations

import logging
from typing import Optional

from .backends.solidity import generate_solidity
from .components import build_default_registry
from .composer import collect_roles, compose_functions
from .constructor import synthesize_constructor, template_values
from .linearizer import linearize
from .model import ContractModel
from .options import OptionsLike, normalize_options
from .permissions import resolve_permissions
from .registry import ComponentRegistry
from .selector import select_components

logger = logging.getLogger(__name__)


def build_contract(options: OptionsLike = None, registry: Optional[ComponentRegistry] = None) -> ContractModel:
    """
    Run the pipeline up to the terminal ContractModel.

    Args:
        options: None (all defaults), an Options instance or a partial
            option mapping
        registry: Component registry (defaults to the built-in one)

    Returns:
        ContractModel ready to be rendered

    Raises:
        ConfigurationError: inconsistent options
        RegistryError / LinearizationError: malformed registry
    """
    if registry is None:
        registry = build_default_registry()
    opts = normalize_options(options)
    profile = registry.hook_profile(opts.hook)

    permissions = resolve_permissions(profile.permissions, opts.permissions, opts.pausable)
    selection = select_components(opts, registry)
    order = linearize(selection.component_ids, registry)
    components = [registry.get(component_id) for component_id in order]

    access = registry.get(registry.access[selection.access]) if selection.access else None
    shares = registry.get(registry.shares[selection.shares.kind]) if selection.shares.kind else None

    values = template_values(selection.shares, opts.inputs)
    constructor = synthesize_constructor(
        components,
        values,
        roles=collect_roles(components),
    )
    composition = compose_functions(components, permissions, profile, access=access, shares=shares)

    imports = set(composition.imports)
    for component in components:
        imports.update(component.imports)

    for note in selection.notes:
        logger.debug("%s: %s", opts.name, note)

    return ContractModel(
        name=opts.name,
        options=opts,
        permissions=permissions,
        components=order,
        parents=tuple(c.base for c in components if c.base),
        imports=tuple(sorted(imports)),
        state=composition.state,
        constructor=constructor,
        functions=composition.functions,
        license=opts.info.license,
        security_contact=opts.info.security_contact,
        registry_version=registry.version,
        notes=selection.notes,
    )


def print_hook(options: OptionsLike = None, registry: Optional[ComponentRegistry] = None) -> str:
    """
    Generate hook contract source text.

    `print_hook()` and `print_hook(defaults)` return identical text.
    """
    return generate_solidity(build_contract(options, registry))
