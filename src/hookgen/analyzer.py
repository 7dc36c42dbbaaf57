"""
Contract Analyzer: read-only summary of a generated contract model.

Provides:
    - Inventory counts (parents, imports, functions, constructor params)
    - The permission bitmap a deployed hook address must carry
    - Warning flags for silently applied defaults and stub return deltas

IMPORTANT: This does NOT modify the model. It only produces reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .components import build_default_registry
from .model import ContractModel, FunctionKind
from .permissions import RETURN_DELTA_PAIRS, permission_flags
from .registry import ComponentRegistry


@dataclass
class ContractReport:
    """Analysis report for one contract model."""

    contract_name: str
    total_parents: int = 0
    total_imports: int = 0
    total_functions: int = 0
    total_constructor_params: int = 0

    # Permissions
    permission_flags: int = 0
    lifecycle_hooks: List[str] = field(default_factory=list)
    return_delta_hooks: List[str] = field(default_factory=list)

    # Access
    privileged_functions: List[str] = field(default_factory=list)

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    @property
    def address_mask(self) -> str:
        """Low 14 bits of the hook address, as hex."""
        return f"0x{self.permission_flags:04x}"

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_contract(model: ContractModel, registry: ComponentRegistry | None = None) -> ContractReport:
    """
    Summarize a ContractModel.

    Flags:
    - Defaults applied during component selection
    - Return-delta permissions whose hook the base does not implement
      (the generated body returns a zero delta placeholder)
    - Privileged functions, so reviewers know what the access mechanism gates
    """
    if registry is None:
        registry = build_default_registry()
    report = ContractReport(contract_name=model.name)

    report.total_parents = len(model.parents)
    report.total_imports = len(model.imports)
    report.total_functions = len(model.functions)
    report.total_constructor_params = len(model.constructor.params)
    report.permission_flags = permission_flags(model.permissions)

    report.lifecycle_hooks = [f.permission.value for f in model.lifecycle_functions()]

    implemented = registry.hook_profile(model.options.hook).implemented
    for delta, primary in RETURN_DELTA_PAIRS.items():
        if not model.permissions.is_enabled(delta):
            continue
        report.return_delta_hooks.append(delta.value)
        if primary not in implemented:
            report.add_warning(
                f"{delta.value} is enabled but {model.options.hook.value} does not implement "
                f"{primary.value}; the generated hook returns a zero delta"
            )

    report.privileged_functions = [
        f.name for f in model.functions if f.kind is not FunctionKind.LIFECYCLE and f.modifiers
    ]

    for note in model.notes:
        report.add_warning(note)

    return report
