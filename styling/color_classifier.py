#!/usr/bin/env python3
"""
Color Classifier

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Inspect the attribute chosen for coloring a layer and decide
how it maps onto a color scale.

Classification rules:
1. No attribute reference, or no usable values -> NONE
2. First present value is not a number -> CATEGORICAL (first-appearance order)
3. Numeric with both signs (max > 0 and min < 0) -> DIVERGING (symmetric)
4. Any other numeric attribute -> SEQUENTIAL

Missing values (absent key, None, NaN) never enter the statistics. Non-finite
numbers are ignored as well.

Dependencies:
- numpy (finite-value statistics)
- pandas (missing-value detection, order-preserving unique)

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

import logging
import numbers
from typing import Any, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from Leaflet_Map.config_types import ClassificationConfig
from Leaflet_Map.models.data_models import (
    AttributeRef,
    Classification,
    ColorType,
    category_key,
    is_missing,
)

logger = logging.getLogger(__name__)


# ===========================================================================
# ATTRIBUTE EXTRACTION
# ===========================================================================


def feature_properties(feature: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the property mapping of a GeoJSON feature or a plain record."""
    if feature.get("type") == "Feature":
        return feature.get("properties") or {}
    return feature


def extract_attribute_values(
    features: Sequence[Mapping[str, Any]], attribute: str
) -> pd.Series:
    """
    Collect one attribute across features, keeping feature order.

    Args:
        features: GeoJSON features or property mappings
        attribute: Property name

    Returns:
        Object-dtype Series, None where the feature lacks the attribute
    """
    values = [feature_properties(f).get(attribute) for f in features]
    return pd.Series(values, dtype=object)


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


# ===========================================================================
# CLASSIFICATION
# ===========================================================================


def classify(
    features: Sequence[Mapping[str, Any]],
    attribute: Any,
    config: Optional[ClassificationConfig] = None,
) -> Classification:
    """
    Classify the distribution of a color attribute across features.

    Args:
        features: GeoJSON features or property mappings, in layer order
        attribute: AttributeRef naming the color attribute; anything else
            (constant color, None) yields a NONE classification
        config: Fallback values for degenerate inputs

    Returns:
        Classification with normalization parameters
    """
    if not isinstance(attribute, AttributeRef):
        return Classification.none()
    if len(features) == 0:
        logger.debug(f"Empty layer, no classification for '{attribute.name}'")
        return Classification.none()

    config = config or ClassificationConfig()
    values = extract_attribute_values(features, attribute.name)
    present = values[~values.map(is_missing).astype(bool)]

    if present.empty:
        logger.warning(
            f"⚠️ Attribute '{attribute.name}' has no values in any feature, "
            "color classification skipped"
        )
        return Classification.none()

    if not _is_number(present.iloc[0]):
        return _classify_categorical(present, attribute.name, config)
    return _classify_numeric(present, attribute.name, config)


def _classify_categorical(
    present: pd.Series, attribute: str, config: ClassificationConfig
) -> Classification:
    """Distinct values in first-appearance order (pd.unique keeps it)."""
    categories = tuple(pd.unique(present.map(category_key)))

    if len(categories) == 1:
        logger.info(
            f"   Attribute '{attribute}' has a single category, "
            f"using fixed value {config.single_category_value}"
        )

    return Classification(
        color_type=ColorType.CATEGORICAL,
        attribute=attribute,
        categories=categories,
        fallback_value=config.single_category_value,
    )


def _classify_numeric(
    present: pd.Series, attribute: str, config: ClassificationConfig
) -> Classification:
    """Min / max over finite numbers; symmetric range when signs differ.

    Only real numbers count. Strings such as "10" are not parsed, matching
    Classification.normalize and the type check in the generated script.
    """
    numbers_only = present[present.map(_is_number).astype(bool)]
    if len(numbers_only) < len(present):
        logger.warning(
            f"⚠️ Attribute '{attribute}' has {len(present) - len(numbers_only)} "
            "non-numeric value(s), treated as missing"
        )
    numeric = numbers_only.to_numpy(dtype=float)
    finite = numeric[np.isfinite(numeric)]

    if finite.size == 0:
        logger.warning(
            f"⚠️ Attribute '{attribute}' has no finite numeric values, "
            "color classification skipped"
        )
        return Classification.none()

    minimum = float(np.min(finite))
    maximum = float(np.max(finite))

    if maximum > 0 and minimum < 0:
        abs_max = max(abs(minimum), abs(maximum))
        return Classification(
            color_type=ColorType.DIVERGING,
            attribute=attribute,
            minimum=-abs_max,
            maximum=abs_max,
            value_range=2 * abs_max,
            fallback_value=config.constant_range_value,
        )

    value_range = maximum - minimum
    if value_range == 0:
        logger.info(
            f"   Attribute '{attribute}' is constant ({minimum}), "
            f"using fixed value {config.constant_range_value}"
        )

    return Classification(
        color_type=ColorType.SEQUENTIAL,
        attribute=attribute,
        minimum=minimum,
        maximum=maximum,
        value_range=value_range,
        fallback_value=config.constant_range_value,
    )


# ===========================================================================
# NORMALIZATION
# ===========================================================================


def normalize_values(
    features: Sequence[Mapping[str, Any]], classification: Classification
) -> List[Optional[float]]:
    """
    Normalized [0, 1] value of the classified attribute for every feature.

    Args:
        features: GeoJSON features or property mappings
        classification: Result of classify() for the same features

    Returns:
        One entry per feature; None where the feature has no usable value
    """
    if classification.attribute is None:
        return [None] * len(features)
    values = extract_attribute_values(features, classification.attribute)
    return [classification.normalize(v) for v in values]
