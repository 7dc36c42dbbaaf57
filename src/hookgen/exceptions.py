"""
Exception hierarchy for hook generation.

Two families:
    - ConfigurationError: the caller's options are inconsistent. Fix the input.
    - RegistryError / LinearizationError: the component registry itself is
      malformed. These are programming errors and are never expected with the
      built-in registry.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class HookGenError(Exception):
    """Base exception for hook generation."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = dict(context) if context is not None else {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigurationError(HookGenError, ValueError):
    """
    Raised when user-supplied options are internally inconsistent.

    The message always names the offending field and the unmet requirement:
        shares.name: ERC20 shares require a non-empty name
    """

    def __init__(
        self,
        field: str,
        requirement: str,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.field = field
        self.requirement = requirement
        message = f"{field}: {requirement}"
        HookGenError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class RegistryError(HookGenError, RuntimeError):
    """Raised when the component registry is malformed (missing or duplicate ids, type conflicts)."""

    def __init__(self, message: str = "", *, component: Optional[str] = None) -> None:
        HookGenError.__init__(self, message, context={"component": component} if component else None)
        RuntimeError.__init__(self, message)


class LinearizationError(RegistryError):
    """Raised when components cannot be put in a valid base order (dependency cycle)."""

    def __init__(self, message: str = "", *, cycle: Optional[list] = None) -> None:
        RegistryError.__init__(self, message)
        self.cycle = list(cycle) if cycle else []
        if self.cycle:
            self.context["cycle"] = self.cycle
