# lambda_fleet_tool/runtimes.py
"""
Runtime family classification and target runtime validation
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern, Tuple

from .errors import InvalidRuntimeFormat, UnsupportedRuntimeFamily

_PREFIX_SPLIT = re.compile(r'[\d.\-]')


class RuntimeFamily(str, Enum):
    """Coarse runtime classification, independent of the exact version"""

    PYTHON = 'python'
    NODEJS = 'nodejs'
    UNSUPPORTED = 'unsupported'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RuntimeRule:
    """Exact format a target runtime of one family must have"""

    family: RuntimeFamily
    pattern: Pattern
    example: str

    def matches(self, runtime: str) -> bool:
        return self.pattern.fullmatch(runtime) is not None


RUNTIME_RULES: Tuple[RuntimeRule, ...] = (
    RuntimeRule(RuntimeFamily.PYTHON, re.compile(r'python3\.\d+'), 'python3.12'),
    RuntimeRule(RuntimeFamily.NODEJS, re.compile(r'nodejs\d+\.x'), 'nodejs20.x'),
)


def runtime_prefix(runtime: Optional[str]) -> str:
    """
    Coarse prefix of a runtime identifier

    Literal python/nodejs prefixes win, anything else is cut at the
    first digit, dot or hyphen ('java11' -> 'java', 'provided.al2' -> 'provided').
    """
    if not runtime:
        return ''
    lowered = runtime.lower()
    for family in (RuntimeFamily.PYTHON, RuntimeFamily.NODEJS):
        if lowered.startswith(family.value):
            return family.value
    return _PREFIX_SPLIT.split(lowered, 1)[0] or lowered


def derive_family(runtime: Optional[str]) -> RuntimeFamily:
    """Classify any runtime string; never raises"""
    prefix = runtime_prefix(runtime)
    for rule in RUNTIME_RULES:
        if rule.family.value == prefix:
            return rule.family
    return RuntimeFamily.UNSUPPORTED


def is_family(runtime: Optional[str], family: RuntimeFamily) -> bool:
    """True when a (possibly non-canonical) fleet runtime belongs to family"""
    return family is not RuntimeFamily.UNSUPPORTED and derive_family(runtime) is family


def rule_for(family: RuntimeFamily) -> Optional[RuntimeRule]:
    for rule in RUNTIME_RULES:
        if rule.family is family:
            return rule
    return None


def validate_target_runtime(target_runtime: Optional[str]) -> RuntimeFamily:
    """
    Validate a requested target runtime and return its family

    Raises UnsupportedRuntimeFamily when no rule covers the coarse prefix,
    InvalidRuntimeFormat when the family is known but the exact pattern fails.
    Pure and local: safe to call before any network access.
    """
    runtime = target_runtime if isinstance(target_runtime, str) else ''
    rule = rule_for(derive_family(runtime))
    if rule is None:
        raise UnsupportedRuntimeFamily(runtime)
    if not rule.matches(runtime):
        raise InvalidRuntimeFormat(runtime, rule.family.value, rule.example)
    return rule.family
