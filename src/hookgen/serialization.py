"""
Serialization helpers for option records.

Provides lossless JSON/YAML round-trip via the camelCase option schema.
This module intentionally keeps serialization structure stable and explicit:
what a front end or option file writes is exactly what `normalize_options`
reads back.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from hookgen.options import Options, OptionsLike, normalize_options


def options_to_dict(options: OptionsLike) -> Dict[str, Any]:
    return normalize_options(options).to_dict()


def options_from_dict(d: Dict[str, Any] | None) -> Options:
    return normalize_options(d or {})


def options_to_json(options: OptionsLike) -> str:
    return json.dumps(options_to_dict(options), sort_keys=True)


def options_from_json(s: str) -> Options:
    d = json.loads(s)
    return options_from_dict(d)


def options_to_yaml(options: OptionsLike) -> str:
    return yaml.safe_dump(options_to_dict(options))


def options_from_yaml(s: str) -> Options:
    d = yaml.safe_load(s)
    return options_from_dict(d)
