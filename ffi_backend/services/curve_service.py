"""
Chart series for the calculators.

Each function samples the same curves the calculator pages plot and returns
them as a list of plain dicts (one per x value), ready for JSON.
"""

import math

from ffi_backend.services.formula_service import failure_probability, reliability


def _sample(max_value: float, steps: int) -> list[float]:
    # k * max / steps rather than repeated addition, so the last point is exactly max
    return [max_value * k / steps for k in range(steps + 1)]


def failure_probability_curve(
    failure_rate: float,
    inspection_interval: float,
    inspection_cost: float,
    failure_cost: float,
    steps: int = 20,
) -> list[dict]:
    """Probability of failure and running cost over ten inspection intervals."""
    points = []
    cumulative_cost = 0.0
    for t in _sample(inspection_interval * 10, steps):
        probability = failure_probability(failure_rate, t)
        cumulative_cost += inspection_cost * (t / inspection_interval) + failure_cost * probability
        points.append({"time": t, "probability": probability, "cumulativeCost": cumulative_cost})
    return points


def reliability_curve(
    failure_rate: float,
    inspection_interval: float,
    target_reliability: float,
    steps: int = 20,
) -> list[dict]:
    return [
        {"time": t, "reliability": reliability(failure_rate, t), "targetReliability": target_reliability}
        for t in _sample(inspection_interval * 2, steps)
    ]


def optimal_interval_curve(
    optimal_hours: float,
    failure_rate: float,
    inspection_cost: float,
    failure_cost: float,
    points: int = 200,
) -> list[dict]:
    """
    Cost lines out to four times the optimal interval (rounded up).

    Inspection cost is Ci·t/T_opt, expected failure cost Cf·λ·t/2, plus the
    probability that a failure is still unidentified at t.
    """
    series = []
    for t in _sample(math.ceil(optimal_hours * 4), points):
        inspection = inspection_cost * (t / optimal_hours) if optimal_hours > 0 else 0.0
        failure = failure_cost * failure_rate * t / 2
        series.append(
            {
                "interval": t,
                "cumulativeCost": inspection + failure,
                "inspectionCost": inspection,
                "failureCost": failure,
                "probabilityOfUnidentifiedFailure": failure_probability(failure_rate, t),
            }
        )
    return series


def voting_systems_curve(
    ffi: float,
    failure_rate: float,
    total_voters: float,
    detection_time: float,
    steps: int = 20,
) -> list[dict]:
    return [
        {
            "time": t,
            "reliability": math.exp(-failure_rate * total_voters * t),
            "detectionProbability": -math.expm1(-t / detection_time),
        }
        for t in _sample(ffi * 3, steps)
    ]
