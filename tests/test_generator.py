"""
Tests for the end-to-end generation pipeline.

These tests verify:
    - Identical options produce byte-identical text
    - Defaults, partial options and the spread defaults agree
    - Lifecycle overrides track the resolved permission set exactly
    - Access control is defaulted whenever privileged functions exist
    - Component order does not depend on option order
"""

import itertools

import pytest

from hookgen import (
    ConfigurationError,
    HookKind,
    build_contract,
    defaults,
    defaults_dict,
    is_access_control_required,
    print_hook,
)
from hookgen.backends.solidity import MAX_LINE_LENGTH
from hookgen.components import build_default_registry
from hookgen.permissions import PRIMARY_PERMISSIONS, Permission, permission_flags

OPTION_SETS = [
    {},
    {"pausable": True},
    {"pausable": True, "access": "managed"},
    {"hook": "BaseAsyncSwap", "transientStorage": True},
    {"hook": "BaseCustomAccounting"},
    {"hook": "BaseCustomCurve", "shares": {"options": "ERC20", "name": "LP", "symbol": "LP"}},
    {"hook": "BaseDynamicFee", "permissions": {"beforeDonate": True}},
    {"hook": "BaseOverrideFee", "pausable": True},
    {"hook": "BaseDynamicAfterFee"},
    {"hook": "BaseHookFee", "access": "roles"},
    {"hook": "AntiSandwichHook"},
    {"hook": "LimitOrderHook", "safeCast": True},
    {"hook": "LiquidityPenaltyHook", "inputs": {"blockNumberOffset": 5}},
    {"hook": "ReHypothecationHook", "pausable": True, "access": "roles"},
    {"shares": {"options": "ERC1155", "uri": "ipfs://meta"}, "permissions": {"afterDonate": True}},
    {"permissions": {"beforeSwapReturnDelta": True, "afterAddLiquidityReturnDelta": True}},
]


class TestDeterminism:
    """Test that output is a pure function of the options."""

    @pytest.mark.parametrize("options", OPTION_SETS)
    def test_repeatable(self, options):
        assert print_hook(options) == print_hook(options)

    def test_defaults_agree(self):
        text = print_hook()
        assert print_hook(defaults) == text
        assert print_hook({}) == text
        assert print_hook(defaults_dict()) == text

    def test_respread_changes_only_the_name(self):
        original = print_hook().splitlines()
        renamed = print_hook({**defaults_dict(), "name": "X"}).splitlines()
        assert len(original) == len(renamed)
        diff = [(a, b) for a, b in zip(original, renamed) if a != b]
        assert diff == [("contract MyHook is BaseHook {", "contract X is BaseHook {")]

    def test_option_order_does_not_matter(self):
        options = {
            "pausable": True,
            "access": "roles",
            "shares": {"options": "ERC1155", "uri": "u"},
            "transientStorage": True,
            "safeCast": True,
        }
        expected = print_hook(options)
        for keys in itertools.permutations(options):
            assert print_hook({k: options[k] for k in keys}) == expected


class TestLockStep:
    """Test that overrides and the permission declaration agree."""

    @pytest.mark.parametrize("options", OPTION_SETS)
    def test_one_override_per_enabled_primary(self, options):
        model = build_contract(options)
        text = print_hook(options)
        enabled = {p for p in PRIMARY_PERMISSIONS if model.permissions.is_enabled(p)}
        assert {f.permission for f in model.lifecycle_functions()} == enabled
        for permission in PRIMARY_PERMISSIONS:
            declared = f"{permission.value}: {'true' if permission in enabled else 'false'}"
            assert declared in text
            assert (f"function _{permission.value}(" in text) == (permission in enabled)

    @pytest.mark.parametrize("kind", list(HookKind))
    def test_intrinsic_permissions_present(self, kind):
        profile = build_default_registry().hook_profile(kind)
        model = build_contract({"hook": kind.value})
        for permission in profile.permissions:
            assert model.permissions.is_enabled(permission)

    def test_return_delta_enables_primary(self):
        model = build_contract({"permissions": {"afterSwapReturnDelta": True}})
        assert model.permissions.is_enabled(Permission.AFTER_SWAP)
        assert model.get_function("_afterSwap") is not None


class TestLayout:
    """Test the rendered text stays within the line limit."""

    @pytest.mark.parametrize("options", OPTION_SETS)
    def test_line_length(self, options):
        for line in print_hook(options).splitlines():
            assert len(line) <= MAX_LINE_LENGTH, line


class TestAccessDefaulting:
    """Test that privileged functions never end up ungated."""

    @pytest.mark.parametrize("kind", list(HookKind))
    @pytest.mark.parametrize("pausable", [False, True])
    def test_access_present_when_required(self, kind, pausable):
        options = {"hook": kind.value, "pausable": pausable}
        model = build_contract(options)
        has_access = any(c in model.components for c in ("Ownable", "AccessControl", "AccessManaged"))
        assert has_access == is_access_control_required(options)

    def test_pausable_defaults_to_ownable(self):
        model = build_contract({"pausable": True, "access": False})
        assert model.parents == ("BaseHook", "Ownable", "Pausable")
        text = print_hook({"pausable": True, "access": False})
        assert "function pause() public onlyOwner {" in text
        assert "        _requireNotPaused();" in text

    def test_default_recorded_in_notes(self):
        model = build_contract({"pausable": True})
        assert any("ownable" in note for note in model.notes)


class TestScenarios:
    """Test concrete generation scenarios."""

    def test_dynamic_fee(self):
        text = print_hook({"name": "MyDynamicFeeHook", "hook": "BaseDynamicFee"})
        assert "contract MyDynamicFeeHook is BaseDynamicFee {" in text
        assert "function _afterInitialize(" in text
        assert "function _getFee(PoolKey calldata key) internal view override returns (uint24) {" in text
        assert "Pausable" not in text
        assert "Ownable" not in text

    def test_custom_curve_with_erc20(self):
        model = build_contract({
            "hook": "BaseCustomCurve",
            "shares": {"options": "ERC20", "name": "Stable LP", "symbol": "SLP"},
        })
        assert model.parents == ("BaseCustomCurve", "ERC20")
        assert model.components.count("CurrencySettler") == 1
        assert 'ERC20("Stable LP", "SLP")' in model.constructor.initializers
        assert model.get_function("_mint").body == ("_mint(params.to, shares);",)

    def test_roles_with_erc1155(self):
        text = print_hook({
            "access": "roles",
            "pausable": True,
            "shares": {"options": "ERC1155", "uri": "ipfs://meta"},
        })
        assert "contract MyHook is BaseHook, AccessControl, Pausable, ERC1155 {" in text
        assert "function pause() public onlyRole(PAUSER_ROLE) {" in text
        assert "override(AccessControl, ERC1155)" in text
        assert "_grantRole(URI_SETTER_ROLE, uriSetter);" in text

    def test_liquidity_penalty_offset(self):
        model = build_contract({"hook": "LiquidityPenaltyHook", "inputs": {"blockNumberOffset": 25}})
        assert model.constructor.initializers == ("LiquidityPenaltyHook(_poolManager, 25)",)
        assert model.parents == ("LiquidityPenaltyHook",)

    def test_liquidity_penalty_default_offset(self):
        model = build_contract({"hook": "LiquidityPenaltyHook"})
        assert model.constructor.initializers == ("LiquidityPenaltyHook(_poolManager, 10)",)

    def test_hook_fee_gates_fee_handler(self):
        text = print_hook({"hook": "BaseHookFee"})
        assert "Ownable" in text
        assert "onlyOwner" in text

    def test_utilities_render_using_directives(self):
        text = print_hook({"currencySettler": True, "safeCast": True})
        assert "    using CurrencySettler for Currency;" in text
        assert "    using SafeCast for uint256;" in text
        assert "contract MyHook is BaseHook {" in text

    def test_security_contact(self):
        text = print_hook({"info": {"securityContact": "sec@example.com", "license": "Apache-2.0"}})
        assert text.startswith("// SPDX-License-Identifier: Apache-2.0\n")
        assert "/// @custom:security-contact sec@example.com\ncontract MyHook" in text

    def test_permission_flags(self):
        model = build_contract({"hook": "BaseDynamicFee"})
        assert permission_flags(model.permissions) == 1 << 12


class TestErrors:
    """Test errors surfaced through the public entry points."""

    def test_string_name_with_newline_is_rejected(self):
        with pytest.raises(ConfigurationError):
            print_hook({"shares": {"options": "ERC20", "name": "a\nb", "symbol": "S"}})

    def test_string_flag_is_rejected(self):
        with pytest.raises(ConfigurationError):
            print_hook({"pausable": "false"})

    def test_erc20_without_name(self):
        with pytest.raises(ConfigurationError) as excinfo:
            print_hook({"shares": {"options": "ERC20", "symbol": "S"}})
        assert "shares.name" in str(excinfo.value)

    def test_unknown_hook(self):
        with pytest.raises(ConfigurationError):
            build_contract({"hook": "NotAHook"})

    def test_unknown_keys_ignored(self):
        assert print_hook({"upgradeable": "uups"}) == print_hook()
