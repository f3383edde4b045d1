"""
Style expression tree.

═══════════════════════════════════════════════════════════════════════════════
ARCHITECTURAL OVERVIEW
═══════════════════════════════════════════════════════════════════════════════

Responsibility: Represent per-feature style logic as a small immutable tree
that is evaluated in Python (tests, legend) or serialized to JavaScript only
at the final emission step.

Nodes:
- Const: literal number / string / null
- Attribute: read feature.properties[name]
- HasValue: feature.properties[name] is present (not null / undefined)
- Normalize: map a raw value into [0, 1] using a Classification
- ScaleLookup: chroma.scale(name)(value).hex()
- Conditional: test ? then : otherwise

For Navigation: Use VS Code outline (Ctrl+Shift+O)

═══════════════════════════════════════════════════════════════════════════════
"""

import json
from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple, Optional, Union

from Leaflet_Map.models.data_models import Classification, ColorType, is_missing


# ═══════════════════════════════════════════════════════════════════════════════
# 🌳 EXPRESSION NODES
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Const:
    value: Union[int, float, str, None]


@dataclass(frozen=True)
class Attribute:
    name: str


@dataclass(frozen=True)
class HasValue:
    name: str


@dataclass(frozen=True)
class Normalize:
    operand: "Expr"
    classification: Classification


@dataclass(frozen=True)
class ScaleLookup:
    scale: str
    operand: "Expr"


@dataclass(frozen=True)
class Conditional:
    test: "Expr"
    then: "Expr"
    otherwise: "Expr"


Expr = Union[Const, Attribute, HasValue, Normalize, ScaleLookup, Conditional]


class ScaleSample(NamedTuple):
    """Python-side result of a ScaleLookup: which scale, at which position."""

    scale: str
    position: Optional[float]


# ═══════════════════════════════════════════════════════════════════════════════
# 🐍 PYTHON EVALUATION
# ═══════════════════════════════════════════════════════════════════════════════


def evaluate(expr: Expr, properties: Mapping[str, Any]) -> Any:
    """
    Evaluate an expression against one feature's properties.

    Args:
        expr: Expression tree
        properties: Feature property mapping

    Returns:
        Evaluated value; ScaleLookup yields a ScaleSample
    """
    if isinstance(expr, Const):
        return expr.value
    if isinstance(expr, Attribute):
        return properties.get(expr.name)
    if isinstance(expr, HasValue):
        return not is_missing(properties.get(expr.name))
    if isinstance(expr, Normalize):
        return expr.classification.normalize(evaluate(expr.operand, properties))
    if isinstance(expr, ScaleLookup):
        return ScaleSample(expr.scale, evaluate(expr.operand, properties))
    if isinstance(expr, Conditional):
        if evaluate(expr.test, properties):
            return evaluate(expr.then, properties)
        return evaluate(expr.otherwise, properties)
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


# ═══════════════════════════════════════════════════════════════════════════════
# 📜 JAVASCRIPT SERIALIZATION
# ═══════════════════════════════════════════════════════════════════════════════


def js_literal(value: Any) -> str:
    """Serialize a Python value as a JavaScript literal."""
    return json.dumps(value, ensure_ascii=False)


def _property_access(name: str, feature_var: str) -> str:
    return f"{feature_var}.properties[{js_literal(name)}]"


def _normalize_js(expr: Normalize, feature_var: str) -> str:
    classification = expr.classification
    operand = to_js(expr.operand, feature_var)

    if classification.color_type is ColorType.CATEGORICAL:
        if classification.is_degenerate:
            return js_literal(classification.fallback_value)
        index = js_literal(classification.category_index)
        return f"({index}[String({operand})] / {classification.count - 1})"

    if classification.is_numeric:
        # Non-number values normalize to null, as Classification.normalize does
        if classification.is_degenerate:
            scaled = js_literal(classification.fallback_value)
        else:
            scaled = (
                f"(({operand} - ({js_literal(classification.minimum)})) / "
                f"{js_literal(classification.value_range)})"
            )
        return f'(typeof {operand} === "number" ? {scaled} : null)'

    return "null"


def to_js(expr: Expr, feature_var: str = "feature") -> str:
    """
    Serialize an expression to JavaScript source text.

    Args:
        expr: Expression tree
        feature_var: Name of the JS variable holding the current feature

    Returns:
        JavaScript expression text
    """
    if isinstance(expr, Const):
        return js_literal(expr.value)
    if isinstance(expr, Attribute):
        return _property_access(expr.name, feature_var)
    if isinstance(expr, HasValue):
        return f"({_property_access(expr.name, feature_var)} != null)"
    if isinstance(expr, Normalize):
        return _normalize_js(expr, feature_var)
    if isinstance(expr, ScaleLookup):
        operand = to_js(expr.operand, feature_var)
        return f"chroma.scale({js_literal(expr.scale)})({operand}).hex()"
    if isinstance(expr, Conditional):
        return (
            f"({to_js(expr.test, feature_var)} ? "
            f"{to_js(expr.then, feature_var)} : "
            f"{to_js(expr.otherwise, feature_var)})"
        )
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")
