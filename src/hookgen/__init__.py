"""
Uniswap v4 Hook Contract Generator

Turns a declarative options record (hook kind, feature toggles, permissions,
shares token, metadata) into Solidity source for one hook contract built on
OpenZeppelin's uniswap-hooks library.

ARCHITECTURAL GUARANTEE:
------------------------
Every stage is a pure function of its input and the read-only component
registry:

    normalize -> resolve permissions -> select -> linearize
              -> constructor -> compose -> render

Public entry points:
    print_hook(options) -> str
    build_contract(options) -> ContractModel
    defaults
    is_access_control_required(partial_options) -> bool
    analyze_contract(model) -> ContractReport
"""

from .analyzer import ContractReport, analyze_contract
from .exceptions import ConfigurationError, HookGenError, LinearizationError, RegistryError
from .generator import build_contract, print_hook
from .options import AccessKind, HookKind, Options, SharesKind, defaults, defaults_dict, normalize_options
from .selector import is_access_control_required

__version__ = "0.1.0"

__all__ = [
    "AccessKind",
    "ConfigurationError",
    "ContractReport",
    "HookGenError",
    "HookKind",
    "LinearizationError",
    "Options",
    "RegistryError",
    "SharesKind",
    "analyze_contract",
    "build_contract",
    "defaults",
    "defaults_dict",
    "is_access_control_required",
    "normalize_options",
    "print_hook",
]
