"""Policy configuration — option lists, YAML files and the environment.

Options follow the runner's command-line spelling::

    --strict / --no-strict
    --allow-started-ignored / --no-allow-started-ignored

A YAML policy file may set the switches directly, list options, or both
(options are applied last)::

    strict: true
    allow_started_ignored: false
    options: [--allow-started-ignored]
"""
from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from step_notifier.errors import PolicyConfigError
from step_notifier.types import Policy

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

ENV_OPTIONS = "STEP_NOTIFIER_OPTIONS"

OPTIONS: dict[str, tuple[str, bool]] = {
    "--strict": ("strict", True),
    "--no-strict": ("strict", False),
    "--allow-started-ignored": ("allow_started_ignored", True),
    "--no-allow-started-ignored": ("allow_started_ignored", False),
}

POLICY_KEYS = frozenset(f.name for f in dataclasses.fields(Policy))


def parse_options(args: Iterable[str], base: Policy | None = None) -> Policy:
    """Apply an option list on top of ``base``; the last occurrence wins."""
    changes: dict[str, bool] = {}
    for arg in args:
        if arg not in OPTIONS:
            raise PolicyConfigError(f"Unknown option: {arg}")
        field, value = OPTIONS[arg]
        changes[field] = value
    return dataclasses.replace(base or Policy(), **changes)


def policy_from_mapping(raw: Mapping[str, Any], base: Policy | None = None) -> Policy:
    changes: dict[str, bool] = {}
    options: list[str] = []
    for key, value in raw.items():
        name = str(key).replace("-", "_")
        if name == "options":
            if not isinstance(value, list) or not all(isinstance(o, str) for o in value):
                raise PolicyConfigError("'options' must be a list of strings")
            options = value
            continue
        if name not in POLICY_KEYS:
            raise PolicyConfigError(f"Unknown policy key: {key}")
        if not isinstance(value, bool):
            raise PolicyConfigError(f"Policy key '{key}' must be true or false, got {value!r}")
        changes[name] = value
    return parse_options(options, dataclasses.replace(base or Policy(), **changes))


def load_policy(path: str | Path, base: Policy | None = None) -> Policy:
    """Read a YAML policy file. A missing file leaves ``base`` unchanged."""
    policy_path = Path(path)
    if not policy_path.exists():
        return base or Policy()

    try:
        raw = yaml.safe_load(policy_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise PolicyConfigError(f"Invalid YAML in {policy_path}: {e}") from e

    if raw is None:
        return base or Policy()
    if not isinstance(raw, dict):
        raise PolicyConfigError(f"{policy_path}: policy must be a mapping")
    return policy_from_mapping(raw, base)


def policy_from_env(environ: Mapping[str, str] | None = None, base: Policy | None = None) -> Policy:
    env = os.environ if environ is None else environ
    return parse_options(env.get(ENV_OPTIONS, "").split(), base)
