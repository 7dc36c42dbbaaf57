"""
Example option sets covering the main feature combinations.

Used by the demo script and as realistic fixtures in tests.
"""
from typing import Any, Dict

from hookgen.options import AccessKind, HookKind


def build_example_options() -> Dict[str, Dict[str, Any]]:
    return {
        "dynamic_fee": {
            "name": "MyDynamicFeeHook",
            "hook": HookKind.BASE_DYNAMIC_FEE.value,
        },
        "pausable_ownable": {
            "name": "GuardedHook",
            "pausable": True,
            "access": AccessKind.OWNABLE.value,
        },
        "custom_curve_erc20": {
            "name": "StableCurveHook",
            "hook": HookKind.BASE_CUSTOM_CURVE.value,
            "shares": {"options": "ERC20", "name": "Stable LP", "symbol": "SLP"},
            "safeCast": True,
        },
        "roles_erc1155": {
            "name": "PositionHook",
            "access": AccessKind.ROLES.value,
            "pausable": True,
            "shares": {"options": "ERC1155", "uri": "https://example.com/{id}.json"},
            "permissions": {"afterSwap": True, "afterSwapReturnDelta": True},
        },
        "liquidity_penalty": {
            "name": "JitPenaltyHook",
            "hook": HookKind.LIQUIDITY_PENALTY_HOOK.value,
            "inputs": {"blockNumberOffset": 25},
            "info": {"securityContact": "security@example.com", "license": "GPL-3.0-or-later"},
        },
    }
