from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fifa_tracker.validation.rules import TABLE_RULES

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fifa_tracker.validation.rules import FieldRule, TableRules


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()


def _is_blank(value: object) -> bool:
    return value is None or value == ""


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return not math.isnan(value)


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _check_field(name: str, rule: FieldRule, value: Any) -> list[str]:
    errors: list[str] = []

    if rule.type == "string" and not isinstance(value, str):
        errors.append(f"{name} muss ein Text sein")
    elif rule.type == "number" and not _is_number(value):
        errors.append(f"{name} muss eine Zahl sein")

    if rule.type == "string" and isinstance(value, str):
        if rule.min_length is not None and len(value) < rule.min_length:
            errors.append(f"{name} muss mindestens {rule.min_length} Zeichen haben")
        if rule.max_length is not None and len(value) > rule.max_length:
            errors.append(f"{name} darf maximal {rule.max_length} Zeichen haben")

    if rule.type == "number" and _is_number(value):
        if rule.min is not None and value < rule.min:
            errors.append(f"{name} muss mindestens {_format_bound(rule.min)} sein")
        if rule.max is not None and value > rule.max:
            errors.append(f"{name} darf maximal {_format_bound(rule.max)} sein")

    if rule.enum is not None and value not in rule.enum:
        errors.append(f"{name} muss einer der folgenden Werte sein: {', '.join(str(v) for v in rule.enum)}")

    return errors


class Validator:
    """Checks records against static per-table field rules.

    Tables without registered rules always validate. Violations are collected
    across every field rather than stopping at the first one.
    """

    def __init__(self, rules: Mapping[str, TableRules] | None = None) -> None:
        self._rules = TABLE_RULES if rules is None else rules

    def validate(self, table: str, record: Mapping[str, Any]) -> ValidationResult:
        table_rules = self._rules.get(table)
        if table_rules is None:
            return ValidationResult(valid=True)

        errors: list[str] = []
        for name, rule in table_rules.items():
            value = record.get(name)
            if _is_blank(value):
                if rule.required:
                    errors.append(f"{name} ist erforderlich")
                continue
            errors.extend(_check_field(name, rule, value))

        return ValidationResult(valid=not errors, errors=tuple(errors))

    def has_rules(self, table: str) -> bool:
        return table in self._rules
