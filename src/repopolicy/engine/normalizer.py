# repopolicy:domain=engine
"""Turn a validated ruleset (version 2 or legacy) into canonical rule descriptors.

Both dialects are handled here and nowhere else; everything downstream only
sees :class:`~repopolicy.engine.models.RuleInfo`.

Version 2::

    version: 2
    rules:
      license-file-exists:
        level: error
        where: ["language=python"]
        rule: {type: file-existence, options: {globsAny: ["LICENSE*"]}}
        fix: {type: file-create, options: {file: LICENSE, text: "..."}}

Legacy (no ``version``)::

    rules:
      all:
        license-file-exists:file-existence: [error, {globsAny: ["LICENSE*"]}]
      language=python:
        setup-py-exists:file-existence: [warning, {globsAny: ["setup.py"]}]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from repopolicy.engine.models import RuleInfo

LEGACY_ALL_GROUP = "all"


def _parse_v2(rules: Mapping[str, Mapping[str, Any]]) -> tuple[RuleInfo, ...]:
    parsed: list[RuleInfo] = []
    for name, cfg in rules.items():
        rule = cfg["rule"]
        fix = cfg.get("fix")
        parsed.append(
            RuleInfo(
                name=name,
                level=cfg["level"],
                where=tuple(cfg.get("where", ())),
                rule_type=rule["type"],
                rule_config=rule.get("options", {}),
                fix_type=fix["type"] if fix else None,
                fix_config=fix.get("options", {}) if fix else None,
                policy_info=cfg.get("policyInfo"),
                policy_url=cfg.get("policyUrl"),
            )
        )
    return tuple(parsed)


def _parse_legacy(groups: Mapping[str, Mapping[str, Any]]) -> tuple[RuleInfo, ...]:
    parsed: list[RuleInfo] = []
    for where, rules in groups.items():
        conditions: tuple[str, ...] = () if where == LEGACY_ALL_GROUP else (where,)
        for key, values in rules.items():
            parts = key.split(":")
            name = parts[0]
            rule_type = parts[1] if len(parts) > 1 else ""
            options = values[1] if len(values) > 1 else None
            parsed.append(
                RuleInfo(
                    name=name,
                    level=values[0],
                    where=conditions,
                    rule_type=rule_type or name,
                    rule_config=options or {},
                )
            )
    return tuple(parsed)


def parse_config(config: Mapping[str, Any]) -> tuple[RuleInfo, ...]:
    """Return the canonical rule sequence for *config*, in declaration order.

    Assumes the config already passed :func:`~repopolicy.engine.schema.validate_config`;
    structurally invalid input raises ``KeyError``/``TypeError``/``IndexError``.
    """
    if "version" in config:
        return _parse_v2(config["rules"])
    return _parse_legacy(config["rules"])
