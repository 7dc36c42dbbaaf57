"""
Tests for component selection and option validation.
"""

import pytest

from hookgen.exceptions import ConfigurationError
from hookgen.options import AccessKind, HookKind, Options, SharesKind, normalize_options
from hookgen.selector import is_access_control_required, select_components


def _select(**kwargs):
    return select_components(normalize_options(kwargs))


class TestSelection:
    """Test which components end up in the contract."""

    def test_defaults_select_only_the_base_hook(self):
        selection = select_components(Options())
        assert selection.component_ids == frozenset({"BaseHook"})
        assert selection.access is None
        assert selection.shares.kind is None
        assert selection.notes == ()

    def test_pausable_defaults_access_to_ownable(self):
        selection = _select(pausable=True)
        assert selection.component_ids == frozenset({"BaseHook", "Pausable", "Ownable"})
        assert selection.access is AccessKind.OWNABLE
        assert any("defaulted access" in note for note in selection.notes)

    def test_explicit_access_is_respected(self):
        selection = _select(pausable=True, access="roles")
        assert "AccessControl" in selection.component_ids
        assert "Ownable" not in selection.component_ids
        assert selection.notes == ()

    def test_explicit_access_without_privileged_functions(self):
        selection = _select(access="managed")
        assert selection.component_ids == frozenset({"BaseHook", "AccessManaged"})

    def test_utilities(self):
        selection = _select(currencySettler=True, safeCast=True, transientStorage=True)
        assert {"CurrencySettler", "SafeCast", "TransientStorage"} <= selection.component_ids

    def test_accounting_hook_defaults_to_erc6909(self):
        selection = _select(hook="BaseCustomAccounting")
        assert selection.shares.kind is SharesKind.ERC6909
        assert "ERC6909" in selection.component_ids
        assert any("defaulted shares" in note for note in selection.notes)

    def test_rehypothecation_defaults_to_erc6909(self):
        selection = _select(hook="ReHypothecationHook")
        assert selection.shares.kind is SharesKind.ERC6909

    def test_erc1155_shares_default_access(self):
        selection = _select(shares={"options": "ERC1155", "uri": "ipfs://meta"})
        assert {"ERC1155", "Ownable"} <= selection.component_ids

    def test_hook_fee_defaults_access(self):
        selection = _select(hook="BaseHookFee")
        assert selection.access is AccessKind.OWNABLE

    def test_no_duplicates_when_access_given_and_required(self):
        selection = _select(pausable=True, access="ownable", shares={"options": "ERC1155", "uri": "u"})
        assert selection.component_ids == frozenset({"BaseHook", "Pausable", "Ownable", "ERC1155"})


class TestAccessControlRequired:
    """Test the partial-options predicate."""

    @pytest.mark.parametrize("options,expected", [
        (None, False),
        ({}, False),
        ({"pausable": True}, True),
        ({"pausable": False}, False),
        ({"hook": "BaseHookFee"}, True),
        ({"hook": "BaseDynamicFee"}, False),
        ({"hook": "BaseCustomAccounting"}, False),
        ({"shares": {"options": "ERC1155"}}, True),
        ({"shares": {"options": "ERC20"}}, False),
        ({"shares": {"options": False}}, False),
        ({"hook": "BaseCustomCurve", "shares": {"options": "ERC1155"}}, True),
    ])
    def test_partial_mappings(self, options, expected):
        assert is_access_control_required(options) is expected

    def test_accepts_options_instance(self):
        assert is_access_control_required(Options(pausable=True)) is True
        assert is_access_control_required(Options()) is False

    def test_non_boolean_pausable_rejected(self):
        with pytest.raises(ConfigurationError) as excinfo:
            is_access_control_required({"pausable": "true"})
        assert excinfo.value.field == "pausable"

    def test_ignores_access_field(self):
        """The predicate reports the need, not whether it is already met."""
        assert is_access_control_required({"pausable": True, "access": "roles"}) is True

    @pytest.mark.parametrize("kind", list(HookKind))
    def test_agrees_with_selection(self, kind):
        for pausable in (False, True):
            opts = normalize_options({"hook": kind.value, "pausable": pausable})
            selection = select_components(opts)
            assert (selection.access is not None) == is_access_control_required(opts)


class TestValidation:
    """Test ConfigurationError messages name the field."""

    def test_erc20_requires_name(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(shares={"options": "ERC20", "symbol": "S"})
        assert excinfo.value.field == "shares.name"
        assert str(excinfo.value).startswith("shares.name:")

    def test_erc20_requires_symbol(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(shares={"options": "ERC20", "name": "Share"})
        assert excinfo.value.field == "shares.symbol"

    def test_erc20_blank_name_rejected(self):
        with pytest.raises(ConfigurationError):
            _select(shares={"options": "ERC20", "name": "  ", "symbol": "S"})

    def test_erc1155_requires_uri(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(shares={"options": "ERC1155"})
        assert excinfo.value.field == "shares.uri"

    def test_limit_order_rejects_shares(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(hook="LimitOrderHook", shares={"options": "ERC6909"})
        assert excinfo.value.field == "shares.options"
        assert "LimitOrderHook" in str(excinfo.value)

    def test_rehypothecation_rejects_erc1155(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(hook="ReHypothecationHook", shares={"options": "ERC1155", "uri": "u"})
        assert excinfo.value.field == "shares.options"

    @pytest.mark.parametrize("name", ["My Hook", "1Hook", "", "Hook-1"])
    def test_invalid_contract_name(self, name):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(name=name)
        assert excinfo.value.field == "name"

    @pytest.mark.parametrize("offset", [-1, "10", True, 1.5])
    def test_invalid_block_number_offset(self, offset):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(hook="LiquidityPenaltyHook", inputs={"blockNumberOffset": offset})
        assert excinfo.value.field == "inputs.blockNumberOffset"

    def test_trailing_newline_in_name(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(name="MyHook\n")
        assert excinfo.value.field == "name"

    @pytest.mark.parametrize("key,value", [("name", "a\nb"), ("symbol", "S\tT")])
    def test_erc20_fields_must_be_single_line(self, key, value):
        shares = {"options": "ERC20", "name": "Share", "symbol": "S"}
        shares[key] = value
        with pytest.raises(ConfigurationError) as excinfo:
            _select(shares=shares)
        assert excinfo.value.field == f"shares.{key}"

    def test_erc1155_uri_must_be_single_line(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(shares={"options": "ERC1155", "uri": "ipfs://x\r\n"})
        assert excinfo.value.field == "shares.uri"

    def test_security_contact_must_be_single_line(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(info={"securityContact": "sec@example.com\ncontract Evil {}"})
        assert excinfo.value.field == "info.securityContact"

    def test_license_must_be_single_line(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(info={"license": "MIT\npragma"})
        assert excinfo.value.field == "info.license"

    def test_quotes_are_escaped_not_rejected(self):
        selection = _select(shares={"options": "ERC20", "name": 'My "LP"', "symbol": "LP"})
        assert selection.shares.name == 'My "LP"'

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            _select(shares={"options": "ERC1155"})

    def test_error_json_payload(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _select(shares={"options": "ERC1155"})
        payload = excinfo.value.to_json_error()
        assert payload["code"] == "ConfigurationError"
        assert payload["message"].startswith("shares.uri")
