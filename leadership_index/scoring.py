import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from leadership_index.dimensions import DIMENSIONS, SCALE

RANKED_COUNT = 3

# =========================
# Bands
# =========================


class Band(str, Enum):
    STRONG = "Strong"
    STABLE = "Stable"
    DEVELOP = "Develop"
    RISK = "Risk"


# Inclusive lower bounds, checked top-down
BAND_THRESHOLDS = (
    (4.2, Band.STRONG),
    (3.6, Band.STABLE),
    (3.0, Band.DEVELOP),
)

BAND_LEGEND = "4.2+ Strong · 3.6–4.19 Stable · 3.0–3.59 Develop · below 3.0 Risk"


def band(value: float) -> Band:
    """
    Classify a score.

      >= 4.2 -> Strong
      >= 3.6 -> Stable
      >= 3.0 -> Develop
      else   -> Risk
    """
    for threshold, label in BAND_THRESHOLDS:
        if value >= threshold:
            return label
    return Band.RISK


# =========================
# Scoring Logic
# =========================


def round_score(value: float | Decimal) -> float:
    """Round half-up to 2 decimals."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def exact_mean(values: list[float]) -> Decimal:
    # summed as Decimal so an exact .xx5 mean rounds up
    return sum((Decimal(str(value)) for value in values), Decimal(0)) / len(values)


def parse_rating(raw: Any) -> float | None:
    """
    Coerce a submitted rating to a number.

    Returns None for anything that should not count as an answer: missing,
    blank, booleans, non-numeric text, NaN/inf and values outside the scale.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or not SCALE[0] <= value <= SCALE[-1]:
        return None
    return value


@dataclass(frozen=True)
class ScoreResult:
    dim_scores: dict[str, float]
    overall: float
    top: list[tuple[str, float]] = field(default_factory=list)
    low: list[tuple[str, float]] = field(default_factory=list)
    answered: int = 0

    @property
    def band(self) -> Band:
        return band(self.overall)

    def to_dict(self) -> dict:
        return {
            "dim_scores": dict(self.dim_scores),
            "dim_bands": {key: band(value).value for key, value in self.dim_scores.items()},
            "overall": self.overall,
            "band": self.band.value,
            "top": [[key, value] for key, value in self.top],
            "low": [[key, value] for key, value in self.low],
            "answered": self.answered,
        }


def dimension_average(values: list[float]) -> float:
    if not values:
        return 0.0
    return round_score(exact_mean(values))


def calculate_scores(ratings: Mapping[str, Any] | None) -> ScoreResult:
    """
    Score a ratings mapping keyed ``"{dimension}-{item}"``.

    Each dimension is the mean of its answered items (0 when none are
    answered), rounded to 2 decimals. The overall score is the mean of the
    rounded dimension scores, so every dimension weighs the same no matter
    how many of its items were answered. Ranking uses the same rounded
    values and falls back to catalog order on ties.
    """
    if not isinstance(ratings, Mapping):
        ratings = {}

    dim_scores: dict[str, float] = {}
    answered = 0
    for dimension in DIMENSIONS:
        values = [
            value
            for value in (parse_rating(ratings.get(key)) for key in dimension.rating_keys())
            if value is not None
        ]
        answered += len(values)
        dim_scores[dimension.key] = dimension_average(values)

    overall = round_score(exact_mean(list(dim_scores.values())))

    # sorted() is stable, so equal scores keep catalog order
    pairs = list(dim_scores.items())
    top = sorted(pairs, key=lambda pair: pair[1], reverse=True)[:RANKED_COUNT]
    low = sorted(pairs, key=lambda pair: pair[1])[:RANKED_COUNT]

    return ScoreResult(dim_scores=dim_scores, overall=overall, top=top, low=low, answered=answered)
