"""Score aggregation and rounding."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, Tuple

from scoring.components import Component, POINTS_SCALE
from scoring.protocols import ScoreAggregator


class WeightedBonusAggregator(ScoreAggregator):
    """
    Weighted average of regular components plus undiluted bonus points.

    Regular components share a weighted average, so adding a low-weight
    component cannot swamp the others. Bonus components skip the average
    (their weight is ignored) and add their points directly. The sum is
    clamped to ``[0, points_scale]``.
    """

    def __init__(self, points_scale: float = POINTS_SCALE):
        self.points_scale = points_scale

    def totals(self, scored: Sequence[Tuple[Component, float]]) -> Tuple[float, float]:
        """Return (weighted_average, bonus_total) for *scored*."""
        weighted_total = 0.0
        total_weight = 0.0
        bonus_total = 0.0

        for component, sub_score in scored:
            if component.is_bonus:
                bonus_total += sub_score
            else:
                weighted_total += sub_score * component.weight
                total_weight += component.weight

        weighted_average = weighted_total / total_weight if total_weight > 0 else 0.0
        return weighted_average, bonus_total

    def aggregate(self, scored: Sequence[Tuple[Component, float]]) -> float:
        weighted_average, bonus_total = self.totals(scored)
        return max(0.0, min(weighted_average + bonus_total, self.points_scale))


def round_half_up(value: float, decimal_places: int) -> float:
    """
    Round away from zero on ties, using the shortest decimal repr of *value*.

    ``round()`` would use banker's rounding on the binary value, so 0.125
    becomes 0.12 and 2.675 becomes 2.67; stored scores expect 0.13 and 2.68.
    """
    places = max(int(decimal_places), 0)
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def format_score(score: float, decimals: int = 0) -> str:
    """Render a rounded score with a percent sign and no trailing zeros (83.30 -> '83.3%')."""
    rounded = Decimal(repr(round_half_up(score, decimals)))
    if rounded == rounded.to_integral_value():
        text = str(int(rounded))
    else:
        text = format(rounded.normalize(), "f")
    return f"{text}%"
