"""Modulation matrix evaluation.

A rule routes a named source value (audio band, LFO, MIDI CC...) onto a
parameter target key. Every frame the runtime asks for the modulated value of
each uniform; several rules on one target add up and the result is clamped to
the union of their ranges.

Target keys are ``<instanceId>.<paramId>`` for a whole parameter and
``<instanceId>.<paramId>.<component>`` for one component of a vector, where
component is one of ``x y z w``, ``r g b a`` or ``0 1 2 3``.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, asdict

from sdfgraph.errors import ModulationError

CURVES = ("linear", "exp", "log")

_CURVE_ALIASES = {
    "linear": "linear",
    "exp": "exp",
    "exponential": "exp",
    "log": "log",
    "logarithmic": "log",
}

_COMPONENT_INDEX = {
    "x": 0, "y": 1, "z": 2, "w": 3,
    "r": 0, "g": 1, "b": 2, "a": 3,
    "0": 0, "1": 1, "2": 2, "3": 3,
}
_COMPONENT_NAMES = "xyzw"


@dataclass(frozen=True)
class ModulationRule:
    id: str
    source: str
    target: str
    amount: float = 1.0
    curve: str = "linear"
    smoothing: float = 0.0
    bipolar: bool = False
    min: float = 0.0
    max: float = 1.0

    @classmethod
    def from_dict(cls, data: dict) -> ModulationRule:
        if not isinstance(data, dict):
            raise ModulationError("Modulation rule must be an object")
        try:
            source = data["source"]
            target = data["target"]
        except KeyError as e:
            raise ModulationError(f"Modulation rule is missing {e.args[0]!r}") from e

        curve_name = str(data.get("curve", "linear")).lower()
        curve = _CURVE_ALIASES.get(curve_name)
        if curve is None:
            raise ModulationError(
                f"Unknown modulation curve '{curve_name}' (expected one of {', '.join(_CURVE_ALIASES)})"
            )
        try:
            return cls(
                id=str(data.get("id", f"{source}->{target}")),
                source=str(source),
                target=str(target),
                amount=float(data.get("amount", 1.0)),
                curve=curve,
                smoothing=float(data.get("smoothing", 0.0)),
                bipolar=bool(data.get("bipolar", False)),
                min=float(data.get("min", 0.0)),
                max=float(data.get("max", 1.0)),
            )
        except (TypeError, ValueError) as e:
            raise ModulationError(f"Modulation rule '{data.get('id', '')}': {e}") from e

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Target keys
# ---------------------------------------------------------------------------

def target_key(instance_id: str, param_id: str, component: str | int | None = None) -> str:
    if component is None:
        return f"{instance_id}.{param_id}"
    index = _COMPONENT_INDEX.get(str(component))
    if index is None:
        raise ModulationError(f"Unknown vector component '{component}'")
    return f"{instance_id}.{param_id}.{_COMPONENT_NAMES[index]}"


def canonical_target(target: str) -> str:
    """Normalize the component suffix so ``c.size.r`` and ``c.size.0`` match ``c.size.x``."""
    parts = target.split(".")
    if len(parts) >= 3 and parts[-1] in _COMPONENT_INDEX:
        return target_key(".".join(parts[:-2]), parts[-2], parts[-1])
    return target


def group_rules(rules) -> dict[str, list[ModulationRule]]:
    grouped: dict[str, list[ModulationRule]] = {}
    for rule in rules:
        grouped.setdefault(canonical_target(rule.target), []).append(rule)
    return grouped


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def _shape(value: float, curve: str) -> float:
    if curve == "exp":
        return value * value
    if curve == "log":
        # NaN propagates to the caller
        return math.sqrt(value) if value >= 0 else math.nan
    return value


def _apply(base: float, sources, rules) -> float:
    if not rules:
        return base

    value = base
    lo = min(rule.min for rule in rules)
    hi = max(rule.max for rule in rules)
    for rule in rules:
        s = sources.get(rule.source, 0.0)
        if rule.bipolar:
            s = 2.0 * s - 1.0
        smoothing = min(max(rule.smoothing, 0.0), 1.0)
        value += _shape(s, rule.curve) * rule.amount * (1.0 - smoothing)

    if lo > hi:
        lo, hi = hi, lo
    # value first so a NaN survives the clamp
    return min(max(value, lo), hi)


def evaluate(base: float, target_key: str, source_values, rules) -> float:
    """Modulated value of ``target_key``; ``base`` when no rule targets it."""
    key = canonical_target(target_key)
    return _apply(base, source_values, [r for r in rules if canonical_target(r.target) == key])


def modulate_value(base, instance_id: str, param_id: str, sources, rules):
    """Modulate a scalar or vector parameter value.

    ``rules`` is either a rule list or the index built by :func:`group_rules`.
    Each vector component takes the whole-parameter rules first, then its own
    component rules.
    """
    grouped = rules if isinstance(rules, dict) else group_rules(rules)
    whole = grouped.get(target_key(instance_id, param_id), ())

    if isinstance(base, (tuple, list)):
        out = []
        for i, component in enumerate(base):
            v = _apply(float(component), sources, whole)
            if i < len(_COMPONENT_NAMES):
                v = _apply(v, sources, grouped.get(target_key(instance_id, param_id, i), ()))
            out.append(v)
        return tuple(out)
    return _apply(float(base), sources, whole)
