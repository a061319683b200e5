"""Composer version constraint evaluation.

Implements the subset of Composer's constraint syntax used by advisory feeds:
  - Alternatives:  "<1.2.0|>=2.0,<2.3.1" (also "||")
  - Conjunctions:  ">=1.0,<1.5" or ">=1.0 <1.5"
  - Ranges:        "1.0 - 2.0", "^1.2", "~1.2.3", "1.2.*", "1.2.x"
  - Comparisons:   >, >=, <, <=, =, ==, !=, <>, bare exact versions

Versions are compared on four numeric components plus stability
(dev < alpha < beta < RC < stable < patch). As in Composer, "<V" and ">=V"
without an explicit stability compare against "V-dev", so "<1.2" excludes
"1.2.0-beta1". Branch versions ("dev-main") only equal themselves.
"""

import re
from dataclasses import dataclass

from maintenance_reporter.utils.logging import logger

DEV = 0
ALPHA = 1
BETA = 2
RC = 3
STABLE = 4
PATCH = 5

_STABILITY_NAMES = {
    "dev": DEV,
    "alpha": ALPHA,
    "a": ALPHA,
    "beta": BETA,
    "b": BETA,
    "rc": RC,
    "stable": STABLE,
    "patch": PATCH,
    "pl": PATCH,
    "p": PATCH,
}

# Composer normalizes "1.x-dev" branch aliases to this component value
BRANCH_ALIAS_COMPONENT = 9999999

_VERSION_RE = re.compile(
    r"^v?(?P<numbers>\d+(?:\.(?:\d+|[xX*])){0,3})"
    r"(?:[._-]?(?P<modifier>stable|beta|b|rc|alpha|a|patch|pl|p)(?:[.-]?(?P<modifier_number>\d+))?)?"
    r"(?P<dev>[.-]?dev)?$",
    re.IGNORECASE,
)
_OPERATOR_RE = re.compile(r"^(<>|!=|>=|<=|==|<|>|=)?\s*(.+)$")
_HYPHEN_RE = re.compile(r"^(\S+)\s+-\s+(\S+)$")
_STABILITY_FLAG_RE = re.compile(r"@(?:stable|rc|beta|alpha|dev)$", re.IGNORECASE)
_OPERATOR_SPACE_RE = re.compile(r"(<>|!=|>=|<=|==|[<>=~^])\s+")


@dataclass(frozen=True)
class Version:
    """A normalized Composer version."""

    numbers: tuple[int, int, int, int] = (0, 0, 0, 0)
    stability: int = STABLE
    stability_number: int = 0
    branch: str | None = None

    @property
    def sort_key(self) -> tuple:
        return (self.numbers, self.stability, self.stability_number)


@dataclass(frozen=True)
class _Parsed:
    components: tuple[int | None, ...]
    stability: int
    stability_number: int
    explicit_stability: bool
    branch: str | None = None

    @property
    def has_wildcard(self) -> bool:
        return None in self.components

    def to_version(self, stability: int | None = None) -> Version:
        numbers = [BRANCH_ALIAS_COMPONENT if c is None else c for c in self.components]
        numbers += [0] * (4 - len(numbers))
        if stability is None:
            return Version(tuple(numbers), self.stability, self.stability_number, self.branch)
        return Version(tuple(numbers), stability, 0, self.branch)


def _parse(text: str) -> _Parsed:
    text = text.strip()
    if not text:
        raise ValueError("empty version")

    if text.lower().startswith("dev-"):
        return _Parsed((), DEV, 0, True, branch=text[4:])

    text = text.split("+", 1)[0]
    match = _VERSION_RE.match(text)
    if not match:
        raise ValueError(f"invalid version '{text}'")

    components: list[int | None] = []
    for part in match.group("numbers").split("."):
        components.append(None if part in ("x", "X", "*") else int(part))

    stability = STABLE
    stability_number = 0
    explicit = False
    if match.group("modifier"):
        stability = _STABILITY_NAMES[match.group("modifier").lower()]
        stability_number = int(match.group("modifier_number") or 0)
        explicit = True
    if match.group("dev"):
        stability = DEV
        stability_number = 0
        explicit = True

    return _Parsed(tuple(components), stability, stability_number, explicit)


def _branch_alias(parsed: _Parsed) -> Version:
    # "1.x-dev": a wildcard implies every later component
    components = list(parsed.components)
    first = components.index(None)
    components = components[:first] + [None] * (4 - first)
    return _Parsed(tuple(components), DEV, 0, True).to_version()


def parse_version(text: str) -> Version:
    """Parse an installed version such as "1.2.0", "v2.0.0-rc3", "1.x-dev" or "dev-main"."""
    parsed = _parse(text)
    if parsed.has_wildcard:
        return _branch_alias(parsed)
    return parsed.to_version()


def _compare(left: Version, right: Version) -> int:
    if left.sort_key < right.sort_key:
        return -1
    if left.sort_key > right.sort_key:
        return 1
    return 0


@dataclass(frozen=True)
class Condition:
    """One comparison against a constraint version."""

    operator: str
    version: Version

    def matches(self, candidate: Version) -> bool:
        if candidate.branch is not None or self.version.branch is not None:
            same = candidate.branch == self.version.branch
            if self.operator == "==":
                return same
            if self.operator == "!=":
                return not same
            return False

        cmp = _compare(candidate, self.version)
        if self.operator == "==":
            return cmp == 0
        if self.operator == "!=":
            return cmp != 0
        if self.operator == "<":
            return cmp < 0
        if self.operator == "<=":
            return cmp <= 0
        if self.operator == ">":
            return cmp > 0
        if self.operator == ">=":
            return cmp >= 0
        raise ValueError(f"unknown operator '{self.operator}'")


def _bump(components: tuple[int | None, ...], position: int) -> Version:
    """Increment the component at position and zero everything after it (as -dev)."""
    numbers = [c or 0 for c in components[: position + 1]]
    numbers[position] += 1
    numbers += [0] * (4 - len(numbers))
    return Version(tuple(numbers), DEV)


def _lower_bound(parsed: _Parsed) -> Condition:
    return Condition(">=", parsed.to_version(None if parsed.explicit_stability else DEV))


def _parse_atom(atom: str) -> list[Condition]:
    atom = _STABILITY_FLAG_RE.sub("", atom.strip())
    atom = atom.split("#", 1)[0]
    if atom in ("", "*", "x", "X", "*.*", "x.x"):
        return []

    if atom.startswith("^"):
        parsed = _parse(atom[1:])
        if parsed.branch is not None:
            raise ValueError(f"caret range on a branch in '{atom}'")
        given = [c or 0 for c in parsed.components]
        position = next((i for i, c in enumerate(given) if c != 0), len(given) - 1)
        return [_lower_bound(parsed), Condition("<", _bump(parsed.components, position))]

    if atom.startswith("~"):
        parsed = _parse(atom[1:])
        if parsed.branch is not None:
            raise ValueError(f"tilde range on a branch in '{atom}'")
        position = max(0, len(parsed.components) - 2)
        return [_lower_bound(parsed), Condition("<", _bump(parsed.components, position))]

    match = _OPERATOR_RE.match(atom)
    if not match:
        raise ValueError(f"invalid constraint '{atom}'")
    operator = match.group(1) or "=="
    parsed = _parse(match.group(2))

    if parsed.has_wildcard and parsed.stability == DEV and parsed.explicit_stability:
        # "1.0.x-dev" names the branch alias 1.0.9999999.9999999-dev, not a range
        operator = {"=": "==", "<>": "!="}.get(operator, operator)
        return [Condition(operator, _branch_alias(parsed))]

    if parsed.has_wildcard:
        if operator not in ("==", "="):
            raise ValueError(f"wildcard not allowed with operator in '{atom}'")
        fixed = parsed.components[: parsed.components.index(None)]
        if not fixed:
            return []
        lower = _Parsed(fixed, DEV, 0, True)
        return [Condition(">=", lower.to_version()), Condition("<", _bump(fixed, len(fixed) - 1))]

    operator = {"=": "==", "<>": "!="}.get(operator, operator)
    if operator in ("<", ">=") and not parsed.explicit_stability and parsed.branch is None:
        return [Condition(operator, parsed.to_version(DEV))]
    return [Condition(operator, parsed.to_version())]


def _parse_hyphen(lower_text: str, upper_text: str) -> list[Condition]:
    lower = _parse(lower_text)
    upper = _parse(upper_text)
    conditions = [_lower_bound(lower)]
    if len(upper.components) < 3:
        # Partial upper bound includes the whole series: "1.0 - 2.0" means <2.1
        conditions.append(Condition("<", _bump(upper.components, len(upper.components) - 1)))
    else:
        conditions.append(Condition("<=", upper.to_version()))
    return conditions


def parse_constraint(constraint: str) -> list[list[Condition]]:
    """Parse a constraint into alternatives, each a list of conditions that must all hold."""
    if not isinstance(constraint, str):
        raise ValueError(f"constraint must be a string, got {type(constraint).__name__}")
    constraint = constraint.strip()
    if not constraint:
        raise ValueError("empty constraint")

    alternatives = []
    for alternative in re.split(r"\s*\|\|?\s*", constraint):
        alternative = alternative.strip()
        if not alternative:
            raise ValueError(f"empty alternative in '{constraint}'")

        hyphen = _HYPHEN_RE.match(alternative)
        if hyphen:
            alternatives.append(_parse_hyphen(hyphen.group(1), hyphen.group(2)))
            continue

        alternative = _OPERATOR_SPACE_RE.sub(r"\1", alternative)
        conditions: list[Condition] = []
        for atom in re.split(r"\s*,\s*|\s+", alternative):
            conditions.extend(_parse_atom(atom))
        alternatives.append(conditions)
    return alternatives


def satisfies(version: str, constraint: str) -> bool:
    """Return True when version is inside the range described by constraint.

    An unparseable installed version never matches and is logged as a
    warning. An unparseable constraint raises ValueError.
    """
    alternatives = parse_constraint(constraint)
    try:
        candidate = parse_version(version)
    except ValueError as e:
        logger.warning(
            "Cannot evaluate installed version {version} against '{constraint}': {err}",
            version=version,
            constraint=constraint,
            err=e,
        )
        return False

    return any(all(c.matches(candidate) for c in conditions) for conditions in alternatives)
