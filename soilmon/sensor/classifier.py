"""Soil condition classification and plant recommendations."""

from types import MappingProxyType

from soilmon.lib.config import DRY_BELOW, NORMAL_MAX, NOT_ON_SOIL_MAX, Condition

_RECOMMENDATIONS = MappingProxyType(
    {
        Condition.DRY: ("Cactus", "Succulents", "Rosemary", "Lavender"),
        Condition.NORMAL: ("Tomato", "Beans", "Marigold", "Basil"),
        Condition.WET: ("Rice", "Taro", "Watermint", "Iris"),
    }
)


def classify(percent: int | None) -> Condition:
    """Classify a moisture percentage.

    A near-zero reading means the probe is out of the soil (or unplugged),
    not that the soil is bone dry.
    """
    if percent is None:
        return Condition.UNKNOWN
    if percent <= NOT_ON_SOIL_MAX:
        return Condition.SENSOR_NOT_ON_SOIL
    if percent < DRY_BELOW:
        return Condition.DRY
    if percent <= NORMAL_MAX:
        return Condition.NORMAL
    return Condition.WET


def recommendations_for(condition: Condition) -> tuple[str, ...]:
    """Return plants suited to a soil condition, best match first."""
    return _RECOMMENDATIONS.get(condition, ())
