"""Backends for contract source output."""

from .solidity import PRAGMA, generate_solidity, save_solidity_file

__all__ = ["PRAGMA", "generate_solidity", "save_solidity_file"]
