"""
Tests for function composition.

These tests verify:
    - One lifecycle override per enabled primary permission
    - Component statements are appended before a single terminal return
    - Return-delta flags change the return shape
    - Privileged functions are gated by the selected access mechanism
    - Functions defined by several bases are overridden jointly
"""

import pytest

from hookgen.components import build_default_registry
from hookgen.composer import collect_roles, compose_functions, compose_permissions_function
from hookgen.exceptions import RegistryError
from hookgen.linearizer import linearize
from hookgen.model import FunctionKind
from hookgen.options import HookKind
from hookgen.permissions import Permission, PermissionSet, resolve_permissions


def _compose(kind, ids, user=PermissionSet(), pausable=False, access=None, shares=None):
    registry = build_default_registry()
    profile = registry.hook_profile(kind)
    components = [registry.get(i) for i in linearize(set(ids) | {profile.component}, registry)]
    permissions = resolve_permissions(profile.permissions, user, pausable)
    return compose_functions(
        components,
        permissions,
        profile,
        access=registry.get(access) if access else None,
        shares=registry.get(shares) if shares else None,
    )


def _get(composition, name):
    return next(f for f in composition.functions if f.name == name)


class TestPermissionsFunction:
    """Test getHookPermissions."""

    def test_lists_all_flags(self):
        function = compose_permissions_function(PermissionSet.of(Permission.BEFORE_SWAP))
        assert function.body[0] == "return Hooks.Permissions({"
        assert function.body[-1] == "});"
        assert len(function.body) == 16
        assert "    beforeSwap: true," in function.body
        assert function.body[-2] == "    afterRemoveLiquidityReturnDelta: false"

    def test_signature(self):
        function = compose_permissions_function(PermissionSet())
        assert function.visibility == "public"
        assert function.mutability == "pure"
        assert function.returns == ("Hooks.Permissions memory",)


class TestLifecycleHooks:
    """Test lifecycle hook overrides."""

    def test_pausable_guards_before_hooks(self):
        composition = _compose(HookKind.BASE_HOOK, {"Ownable", "Pausable"}, pausable=True, access="Ownable")
        names = [f.name for f in composition.functions]
        assert names == [
            "getHookPermissions",
            "_beforeAddLiquidity",
            "_beforeRemoveLiquidity",
            "_beforeSwap",
            "_beforeDonate",
            "pause",
            "unpause",
        ]
        assert _get(composition, "_beforeSwap").body == (
            "_requireNotPaused();",
            "return (this.beforeSwap.selector, BeforeSwapDeltaLibrary.ZERO_DELTA, 0);",
        )
        assert _get(composition, "_beforeDonate").body == (
            "_requireNotPaused();",
            "return this.beforeDonate.selector;",
        )

    def test_one_function_per_enabled_primary(self):
        user = PermissionSet.of(Permission.AFTER_INITIALIZE, Permission.AFTER_DONATE)
        composition = _compose(HookKind.BASE_HOOK, set(), user=user)
        lifecycle = [f for f in composition.functions if f.kind is FunctionKind.LIFECYCLE]
        assert [f.permission for f in lifecycle] == [Permission.AFTER_INITIALIZE, Permission.AFTER_DONATE]

    def test_implemented_hook_delegates_to_base(self):
        composition = _compose(HookKind.BASE_DYNAMIC_FEE, set())
        assert _get(composition, "_afterInitialize").body == (
            "return super._afterInitialize(sender, key, sqrtPriceX96, tick);",
        )

    def test_pausable_prepends_before_super_call(self):
        composition = _compose(HookKind.BASE_CUSTOM_CURVE, {"Pausable", "Ownable", "ERC6909"},
                               pausable=True, access="Ownable", shares="ERC6909")
        assert _get(composition, "_beforeSwap").body == (
            "_requireNotPaused();",
            "return super._beforeSwap(sender, key, params, hookData);",
        )

    def test_after_swap_return_delta(self):
        user = PermissionSet.of(Permission.AFTER_SWAP_RETURN_DELTA)
        composition = _compose(HookKind.BASE_HOOK, set(), user=user)
        body = _get(composition, "_afterSwap").body
        assert "int128 hookDelta = 0;" in body
        assert body[-1] == "return (this.afterSwap.selector, hookDelta);"

    def test_after_swap_without_return_delta(self):
        composition = _compose(HookKind.BASE_HOOK, set(), user=PermissionSet.of(Permission.AFTER_SWAP))
        assert _get(composition, "_afterSwap").body == ("return (this.afterSwap.selector, 0);",)

    def test_liquidity_return_delta_imports_library(self):
        user = PermissionSet.of(Permission.AFTER_ADD_LIQUIDITY_RETURN_DELTA)
        composition = _compose(HookKind.BASE_HOOK, set(), user=user)
        body = _get(composition, "_afterAddLiquidity").body
        assert "BalanceDelta hookDelta = BalanceDeltaLibrary.ZERO_DELTA;" in body
        assert "BalanceDeltaLibrary" in {ref.symbol for ref in composition.imports}

    def test_single_terminal_return(self):
        composition = _compose(HookKind.BASE_HOOK, {"Ownable", "Pausable"}, pausable=True, access="Ownable")
        for function in composition.functions:
            if function.kind is FunctionKind.LIFECYCLE:
                returns = [s for s in function.body if s.startswith("return")]
                assert len(returns) == 1
                assert function.body[-1] == returns[0]


class TestAccessGating:
    """Test modifiers on privileged functions."""

    def test_ownable(self):
        composition = _compose(HookKind.BASE_HOOK, {"Ownable", "Pausable"}, pausable=True, access="Ownable")
        pause = _get(composition, "pause")
        assert pause.modifiers == ("onlyOwner",)
        assert pause.overrides is None
        assert pause.visibility == "public"

    def test_managed(self):
        composition = _compose(HookKind.BASE_HOOK, {"AccessManaged", "Pausable"}, pausable=True,
                               access="AccessManaged")
        assert _get(composition, "unpause").modifiers == ("restricted",)

    def test_roles(self):
        composition = _compose(HookKind.BASE_HOOK, {"AccessControl", "Pausable", "ERC1155"}, pausable=True,
                               access="AccessControl", shares="ERC1155")
        assert _get(composition, "pause").modifiers == ("onlyRole(PAUSER_ROLE)",)
        assert _get(composition, "setURI").modifiers == ("onlyRole(URI_SETTER_ROLE)",)
        assert 'bytes32 public constant PAUSER_ROLE = keccak256("PAUSER_ROLE");' in composition.state
        assert 'bytes32 public constant URI_SETTER_ROLE = keccak256("URI_SETTER_ROLE");' in composition.state

    def test_ownable_declares_no_role_constants(self):
        composition = _compose(HookKind.BASE_HOOK, {"Ownable", "Pausable"}, pausable=True, access="Ownable")
        assert not any("_ROLE" in s for s in composition.state)

    def test_privileged_function_without_access(self):
        with pytest.raises(RegistryError) as excinfo:
            _compose(HookKind.BASE_HOOK, {"Pausable"}, pausable=True)
        assert "pause" in str(excinfo.value)

    def test_collect_roles_order(self):
        registry = build_default_registry()
        components = [registry.get(i) for i in ("BaseHookFee", "Pausable", "ERC1155")]
        assert collect_roles(components) == ("FEE_COLLECTOR", "PAUSER", "URI_SETTER")


class TestSharedFunctions:
    """Test joint overrides and share hooks."""

    def test_supports_interface_joint_override(self):
        composition = _compose(HookKind.BASE_HOOK, {"AccessControl", "Pausable", "ERC1155"}, pausable=True,
                               access="AccessControl", shares="ERC1155")
        last = composition.functions[-1]
        assert last.name == "supportsInterface"
        assert last.kind is FunctionKind.SHARED
        assert last.overrides == ("AccessControl", "ERC1155")
        assert last.body == ("return super.supportsInterface(interfaceId);",)

    def test_single_definition_needs_no_override(self):
        composition = _compose(HookKind.BASE_HOOK, {"ERC6909"}, shares="ERC6909")
        assert all(f.name != "supportsInterface" for f in composition.functions)

    def test_accounting_hook_mints_shares(self):
        composition = _compose(HookKind.BASE_CUSTOM_ACCOUNTING, {"ERC6909"}, shares="ERC6909")
        mint = _get(composition, "_mint")
        burn = _get(composition, "_burn")
        assert mint.kind is FunctionKind.SHARES
        assert mint.body == ("_mint(params.to, 0, shares);",)
        assert burn.body == ("_burn(msg.sender, 0, shares);",)

    def test_plain_hook_does_not_mint(self):
        composition = _compose(HookKind.BASE_HOOK, {"ERC20"}, shares="ERC20")
        assert all(f.kind is not FunctionKind.SHARES for f in composition.functions)
