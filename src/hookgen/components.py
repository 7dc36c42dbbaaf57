"""
Built-in component registry for OpenZeppelin Uniswap v4 hooks.

One record per component: the 12 hook bases, three access-control
mechanisms, the pausable module, three shares tokens and three utility
libraries. `build_default_registry()` returns the shared, read-only
ComponentRegistry used when callers do not inject their own.
"""

from functools import lru_cache

from .options import AccessKind, HookKind, SharesKind
from .permissions import PAUSABLE_PERMISSIONS, Permission
from .registry import (
    Component,
    ComponentRegistry,
    FunctionTemplate,
    HookProfile,
    ImportRef,
    Param,
    Tier,
)

REGISTRY_VERSION = "1.1.0"

_HOOKS = "@openzeppelin/uniswap-hooks/src"
_OZ = "@openzeppelin/contracts"
_V4 = "@uniswap/v4-core/src"

IPOOL_MANAGER = ImportRef(f"{_V4}/interfaces/IPoolManager.sol", "IPoolManager")
HOOKS_LIB = ImportRef(f"{_V4}/libraries/Hooks.sol", "Hooks")
POOL_KEY = ImportRef(f"{_V4}/types/PoolKey.sol", "PoolKey")
CURRENCY = ImportRef(f"{_V4}/types/Currency.sol", "Currency")
BALANCE_DELTA = ImportRef(f"{_V4}/types/BalanceDelta.sol", "BalanceDelta")
BALANCE_DELTA_LIBRARY = ImportRef(f"{_V4}/types/BalanceDelta.sol", "BalanceDeltaLibrary")
BEFORE_SWAP_DELTA = ImportRef(f"{_V4}/types/BeforeSwapDelta.sol", "BeforeSwapDelta")
BEFORE_SWAP_DELTA_LIBRARY = ImportRef(f"{_V4}/types/BeforeSwapDelta.sol", "BeforeSwapDeltaLibrary")
SWAP_PARAMS = ImportRef(f"{_V4}/types/PoolOperation.sol", "SwapParams")
MODIFY_LIQUIDITY_PARAMS = ImportRef(f"{_V4}/types/PoolOperation.sol", "ModifyLiquidityParams")

POOL_MANAGER_PARAM = Param("IPoolManager", "_poolManager")

_BASE_HOOK_INIT = "BaseHook(_poolManager)"

# Parameter list shared by the fee hooks' per-swap callbacks.
_SWAP_CALLBACK_PARAMS = (
    "address sender",
    "PoolKey calldata key",
    "SwapParams calldata params",
    "bytes calldata hookData",
)

_AFTER_SWAP_HANDLER = FunctionTemplate(
    name="_afterSwapHandler",
    params=(
        "PoolKey calldata key",
        "SwapParams calldata params",
        "BalanceDelta delta",
        "uint256 targetUnspecifiedAmount",
        "uint256 feeAmount",
    ),
    body=("// Handle the fee collected on the unspecified currency",),
    imports=(POOL_KEY, SWAP_PARAMS, BALANCE_DELTA),
)


def _hook_component(kind, module, parents=(), ctor_init=_BASE_HOOK_INIT, functions=()):
    """A hook base: inherits `kind`, takes the pool manager, optionally depends on utilities."""
    imports = (ImportRef(f"{_HOOKS}/{module}/{kind.value}.sol", kind.value), IPOOL_MANAGER, HOOKS_LIB)
    if kind is not HookKind.BASE_HOOK and ctor_init.startswith("BaseHook("):
        # Initialized through an indirect base; the name must be in scope.
        imports += (ImportRef(f"{_HOOKS}/base/BaseHook.sol", "BaseHook"),)
    return Component(
        id=kind.value,
        tier=Tier.HOOK,
        base=kind.value,
        parents=tuple(parents),
        imports=imports,
        ctor_params=(POOL_MANAGER_PARAM,),
        ctor_init=ctor_init,
        functions=tuple(functions),
    )


_CUSTOM_ACCOUNTING_FUNCTIONS = (
    FunctionTemplate(
        name="_getAddLiquidity",
        params=("uint160 sqrtPriceX96", "AddLiquidityParams memory params"),
        mutability="view",
        returns=("bytes memory modify", "uint256 shares"),
        body=(
            "// Compute the liquidity modification and the shares to mint",
            "return (modify, shares);",
        ),
    ),
    FunctionTemplate(
        name="_getRemoveLiquidity",
        params=("RemoveLiquidityParams memory params",),
        mutability="view",
        returns=("bytes memory modify", "uint256 shares"),
        body=(
            "// Compute the liquidity modification and the shares to burn",
            "return (modify, shares);",
        ),
    ),
)

_CUSTOM_CURVE_FUNCTIONS = (
    FunctionTemplate(
        name="_getUnspecifiedAmount",
        params=("SwapParams calldata params",),
        returns=("uint256 unspecifiedAmount",),
        body=("// Price the swap on the custom curve",),
        imports=(SWAP_PARAMS,),
    ),
    FunctionTemplate(
        name="_getSwapFeeAmount",
        params=("SwapParams calldata params", "uint256 unspecifiedAmount"),
        returns=("uint256 swapFeeAmount",),
        body=("// Compute the fee charged on the unspecified amount",),
        imports=(SWAP_PARAMS,),
    ),
    FunctionTemplate(
        name="_getAmountIn",
        params=("AddLiquidityParams memory params",),
        returns=("uint256 amount0", "uint256 amount1", "uint256 shares"),
        body=("// Compute the token amounts taken and the shares minted",),
    ),
    FunctionTemplate(
        name="_getAmountOut",
        params=("RemoveLiquidityParams memory params",),
        returns=("uint256 amount0", "uint256 amount1", "uint256 shares"),
        body=("// Compute the token amounts returned and the shares burned",),
    ),
)

HOOK_COMPONENTS = (
    _hook_component(HookKind.BASE_HOOK, "base"),
    _hook_component(HookKind.BASE_ASYNC_SWAP, "base", parents=("CurrencySettler",)),
    _hook_component(
        HookKind.BASE_CUSTOM_ACCOUNTING,
        "base",
        parents=("CurrencySettler",),
        functions=_CUSTOM_ACCOUNTING_FUNCTIONS,
    ),
    _hook_component(
        HookKind.BASE_CUSTOM_CURVE,
        "base",
        parents=("CurrencySettler", "SafeCast"),
        functions=_CUSTOM_CURVE_FUNCTIONS,
    ),
    _hook_component(
        HookKind.BASE_DYNAMIC_FEE,
        "fee",
        functions=(
            FunctionTemplate(
                name="_getFee",
                params=("PoolKey calldata key",),
                mutability="view",
                returns=("uint24",),
                body=("// LP fee in hundredths of a bip", "return 3000;"),
                imports=(POOL_KEY,),
            ),
        ),
    ),
    _hook_component(
        HookKind.BASE_OVERRIDE_FEE,
        "fee",
        functions=(
            FunctionTemplate(
                name="_getFee",
                params=_SWAP_CALLBACK_PARAMS,
                mutability="view",
                returns=("uint24",),
                body=("// LP fee override in hundredths of a bip", "return 3000;"),
                imports=(POOL_KEY, SWAP_PARAMS),
            ),
        ),
    ),
    _hook_component(
        HookKind.BASE_DYNAMIC_AFTER_FEE,
        "fee",
        functions=(
            FunctionTemplate(
                name="_getTargetUnspecified",
                params=_SWAP_CALLBACK_PARAMS,
                mutability="view",
                returns=("uint256 targetUnspecifiedAmount", "bool applyTarget"),
                body=("// Target output for the swap; fees are taken from any surplus", "return (0, false);"),
                imports=(POOL_KEY, SWAP_PARAMS),
            ),
            _AFTER_SWAP_HANDLER,
        ),
    ),
    _hook_component(
        HookKind.BASE_HOOK_FEE,
        "fee",
        functions=(
            FunctionTemplate(
                name="_getHookFee",
                params=(
                    "address sender",
                    "PoolKey calldata key",
                    "SwapParams calldata params",
                    "BalanceDelta delta",
                    "bytes calldata hookData",
                ),
                mutability="view",
                returns=("uint24",),
                body=("// Hook fee in hundredths of a bip, taken from the unspecified currency", "return 0;"),
                imports=(POOL_KEY, SWAP_PARAMS, BALANCE_DELTA),
            ),
            FunctionTemplate(
                name="handleHookFees",
                params=("Currency[] memory currencies",),
                visibility="public",
                body=("// Withdraw or distribute the accrued hook fees",),
                role="FEE_COLLECTOR",
                imports=(CURRENCY,),
            ),
        ),
    ),
    _hook_component(HookKind.ANTI_SANDWICH_HOOK, "general", functions=(_AFTER_SWAP_HANDLER,)),
    _hook_component(HookKind.LIMIT_ORDER_HOOK, "general", parents=("CurrencySettler",)),
    _hook_component(
        HookKind.LIQUIDITY_PENALTY_HOOK,
        "general",
        parents=("SafeCast",),
        ctor_init="LiquidityPenaltyHook(_poolManager, {blockNumberOffset})",
    ),
    _hook_component(
        HookKind.RE_HYPOTHECATION_HOOK,
        "general",
        parents=("CurrencySettler",),
        functions=(
            FunctionTemplate(
                name="getCurrencyYieldSource",
                params=("Currency currency",),
                visibility="public",
                mutability="view",
                returns=("address yieldSource",),
                body=("// Return the yield source (e.g. an ERC-4626 vault) for the currency",),
                imports=(CURRENCY,),
            ),
        ),
    ),
)

_P = Permission

HOOK_PROFILES = (
    HookProfile(HookKind.BASE_HOOK, "BaseHook"),
    HookProfile(
        HookKind.BASE_ASYNC_SWAP,
        "BaseAsyncSwap",
        permissions=frozenset({_P.BEFORE_SWAP, _P.BEFORE_SWAP_RETURN_DELTA}),
        implemented=frozenset({_P.BEFORE_SWAP}),
    ),
    HookProfile(
        HookKind.BASE_CUSTOM_ACCOUNTING,
        "BaseCustomAccounting",
        permissions=frozenset({_P.BEFORE_INITIALIZE, _P.BEFORE_ADD_LIQUIDITY, _P.BEFORE_REMOVE_LIQUIDITY}),
        implemented=frozenset({_P.BEFORE_INITIALIZE, _P.BEFORE_ADD_LIQUIDITY, _P.BEFORE_REMOVE_LIQUIDITY}),
        shares_required=True,
        mints_shares=True,
    ),
    HookProfile(
        HookKind.BASE_CUSTOM_CURVE,
        "BaseCustomCurve",
        permissions=frozenset({
            _P.BEFORE_INITIALIZE,
            _P.BEFORE_ADD_LIQUIDITY,
            _P.BEFORE_REMOVE_LIQUIDITY,
            _P.BEFORE_SWAP,
            _P.BEFORE_SWAP_RETURN_DELTA,
        }),
        implemented=frozenset({
            _P.BEFORE_INITIALIZE,
            _P.BEFORE_ADD_LIQUIDITY,
            _P.BEFORE_REMOVE_LIQUIDITY,
            _P.BEFORE_SWAP,
        }),
        shares_required=True,
        mints_shares=True,
    ),
    HookProfile(
        HookKind.BASE_DYNAMIC_FEE,
        "BaseDynamicFee",
        permissions=frozenset({_P.AFTER_INITIALIZE}),
        implemented=frozenset({_P.AFTER_INITIALIZE}),
    ),
    HookProfile(
        HookKind.BASE_OVERRIDE_FEE,
        "BaseOverrideFee",
        permissions=frozenset({_P.AFTER_INITIALIZE, _P.BEFORE_SWAP}),
        implemented=frozenset({_P.AFTER_INITIALIZE, _P.BEFORE_SWAP}),
    ),
    HookProfile(
        HookKind.BASE_DYNAMIC_AFTER_FEE,
        "BaseDynamicAfterFee",
        permissions=frozenset({_P.BEFORE_SWAP, _P.AFTER_SWAP, _P.AFTER_SWAP_RETURN_DELTA}),
        implemented=frozenset({_P.BEFORE_SWAP, _P.AFTER_SWAP}),
    ),
    HookProfile(
        HookKind.BASE_HOOK_FEE,
        "BaseHookFee",
        permissions=frozenset({_P.AFTER_SWAP, _P.AFTER_SWAP_RETURN_DELTA}),
        implemented=frozenset({_P.AFTER_SWAP}),
    ),
    HookProfile(
        HookKind.ANTI_SANDWICH_HOOK,
        "AntiSandwichHook",
        permissions=frozenset({_P.BEFORE_SWAP, _P.AFTER_SWAP, _P.AFTER_SWAP_RETURN_DELTA}),
        implemented=frozenset({_P.BEFORE_SWAP, _P.AFTER_SWAP}),
    ),
    HookProfile(
        HookKind.LIMIT_ORDER_HOOK,
        "LimitOrderHook",
        permissions=frozenset({_P.AFTER_INITIALIZE, _P.AFTER_SWAP}),
        implemented=frozenset({_P.AFTER_INITIALIZE, _P.AFTER_SWAP}),
        # Orders are tracked by the hook itself; a shares token has nothing to represent.
        shares_allowed=frozenset(),
    ),
    HookProfile(
        HookKind.LIQUIDITY_PENALTY_HOOK,
        "LiquidityPenaltyHook",
        permissions=frozenset({
            _P.AFTER_ADD_LIQUIDITY,
            _P.AFTER_REMOVE_LIQUIDITY,
            _P.AFTER_ADD_LIQUIDITY_RETURN_DELTA,
            _P.AFTER_REMOVE_LIQUIDITY_RETURN_DELTA,
        }),
        implemented=frozenset({_P.AFTER_ADD_LIQUIDITY, _P.AFTER_REMOVE_LIQUIDITY}),
    ),
    HookProfile(
        HookKind.RE_HYPOTHECATION_HOOK,
        "ReHypothecationHook",
        permissions=frozenset({
            _P.BEFORE_INITIALIZE,
            _P.BEFORE_ADD_LIQUIDITY,
            _P.BEFORE_REMOVE_LIQUIDITY,
            _P.BEFORE_SWAP,
            _P.BEFORE_SWAP_RETURN_DELTA,
        }),
        implemented=frozenset({
            _P.BEFORE_INITIALIZE,
            _P.BEFORE_ADD_LIQUIDITY,
            _P.BEFORE_REMOVE_LIQUIDITY,
            _P.BEFORE_SWAP,
        }),
        shares_required=True,
        shares_allowed=frozenset({SharesKind.ERC20, SharesKind.ERC6909}),
        mints_shares=True,
    ),
)

ACCESS_COMPONENTS = (
    Component(
        id="Ownable",
        tier=Tier.ACCESS,
        base="Ownable",
        imports=(ImportRef(f"{_OZ}/access/Ownable.sol", "Ownable"),),
        ctor_params=(Param("address", "initialOwner"),),
        ctor_init="Ownable(initialOwner)",
        gate="onlyOwner",
    ),
    Component(
        id="AccessControl",
        tier=Tier.ACCESS,
        base="AccessControl",
        imports=(ImportRef(f"{_OZ}/access/AccessControl.sol", "AccessControl"),),
        ctor_params=(Param("address", "defaultAdmin"),),
        ctor_body=("_grantRole(DEFAULT_ADMIN_ROLE, defaultAdmin);",),
        interfaces=("supportsInterface",),
        gate="onlyRole({role}_ROLE)",
        grants_roles=True,
    ),
    Component(
        id="AccessManaged",
        tier=Tier.ACCESS,
        base="AccessManaged",
        imports=(ImportRef(f"{_OZ}/access/manager/AccessManaged.sol", "AccessManaged"),),
        ctor_params=(Param("address", "initialAuthority"),),
        ctor_init="AccessManaged(initialAuthority)",
        gate="restricted",
    ),
)

PAUSABLE_COMPONENT = Component(
    id="Pausable",
    tier=Tier.PAUSABLE,
    base="Pausable",
    imports=(ImportRef(f"{_OZ}/utils/Pausable.sol", "Pausable"),),
    hook_bodies={p: ("_requireNotPaused();",) for p in PAUSABLE_PERMISSIONS},
    functions=(
        FunctionTemplate(name="pause", visibility="public", body=("_pause();",), override=False, role="PAUSER"),
        FunctionTemplate(name="unpause", visibility="public", body=("_unpause();",), override=False, role="PAUSER"),
    ),
)

_MINT_PARAMS = (
    "AddLiquidityParams memory params",
    "BalanceDelta callerDelta",
    "BalanceDelta feesAccrued",
    "uint256 shares",
)
_BURN_PARAMS = (
    "RemoveLiquidityParams memory params",
    "BalanceDelta callerDelta",
    "BalanceDelta feesAccrued",
    "uint256 shares",
)


def _share_functions(mint: str, burn: str):
    return (
        FunctionTemplate(name="_mint", params=_MINT_PARAMS, body=(mint,), imports=(BALANCE_DELTA,)),
        FunctionTemplate(name="_burn", params=_BURN_PARAMS, body=(burn,), imports=(BALANCE_DELTA,)),
    )


SHARES_COMPONENTS = (
    Component(
        id="ERC20",
        tier=Tier.SHARES,
        base="ERC20",
        imports=(ImportRef(f"{_OZ}/token/ERC20/ERC20.sol", "ERC20"),),
        ctor_init='ERC20("{name}", "{symbol}")',
        share_functions=_share_functions("_mint(params.to, shares);", "_burn(msg.sender, shares);"),
    ),
    Component(
        id="ERC6909",
        tier=Tier.SHARES,
        base="ERC6909",
        imports=(ImportRef(f"{_OZ}/token/ERC6909/draft-ERC6909.sol", "ERC6909"),),
        interfaces=("supportsInterface",),
        share_functions=_share_functions("_mint(params.to, 0, shares);", "_burn(msg.sender, 0, shares);"),
    ),
    Component(
        id="ERC1155",
        tier=Tier.SHARES,
        base="ERC1155",
        imports=(ImportRef(f"{_OZ}/token/ERC1155/ERC1155.sol", "ERC1155"),),
        ctor_init='ERC1155("{uri}")',
        interfaces=("supportsInterface",),
        functions=(
            FunctionTemplate(
                name="setURI",
                params=("string memory newuri",),
                visibility="public",
                body=("_setURI(newuri);",),
                override=False,
                role="URI_SETTER",
            ),
        ),
        share_functions=_share_functions('_mint(params.to, 0, shares, "");', "_burn(msg.sender, 0, shares);"),
    ),
)

UTILITY_COMPONENTS = (
    Component(
        id="CurrencySettler",
        tier=Tier.UTILITY,
        imports=(ImportRef(f"{_HOOKS}/utils/CurrencySettler.sol", "CurrencySettler"), CURRENCY),
        state=("using CurrencySettler for Currency;",),
    ),
    Component(
        id="SafeCast",
        tier=Tier.UTILITY,
        imports=(ImportRef(f"{_OZ}/utils/math/SafeCast.sol", "SafeCast"),),
        state=("using SafeCast for uint256;", "using SafeCast for int256;"),
    ),
    Component(
        id="TransientStorage",
        tier=Tier.UTILITY,
        imports=(ImportRef(f"{_OZ}/utils/TransientSlot.sol", "TransientSlot"),),
        state=("using TransientSlot for *;",),
    ),
)


@lru_cache(maxsize=None)
def build_default_registry() -> ComponentRegistry:
    """The built-in registry. Constructed once per process and shared."""
    return ComponentRegistry(
        components=HOOK_COMPONENTS + ACCESS_COMPONENTS + (PAUSABLE_COMPONENT,) + SHARES_COMPONENTS + UTILITY_COMPONENTS,
        hooks=HOOK_PROFILES,
        access={
            AccessKind.OWNABLE: "Ownable",
            AccessKind.ROLES: "AccessControl",
            AccessKind.MANAGED: "AccessManaged",
        },
        shares={kind: kind.value for kind in SharesKind},
        utilities={
            "currency_settler": "CurrencySettler",
            "safe_cast": "SafeCast",
            "transient_storage": "TransientStorage",
        },
        pausable="Pausable",
        version=REGISTRY_VERSION,
    )
