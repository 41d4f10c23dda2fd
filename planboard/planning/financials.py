"""Cost and run-rate rollups.

Value is assumed to be realized when a feature completes, so every rollup
buckets a feature's estimated cost into the month of its end date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .dates import month_key, month_label, parse_date
from .exceptions import MalformedDateError
from .models import GLOBAL, Feature, Priority, RunRateTable, Status, System

logger = logging.getLogger(__name__)

UNASSIGNED_PROGRAM = "Unassigned"


@dataclass
class MonthlyFinancial:
    month: str
    payment: float
    cumulative: float
    key: str


@dataclass
class FinancialComparison:
    month: str
    budget: float
    run_rate: float
    diff: float
    key: str


@dataclass
class ProgramCost:
    name: str
    cost: float


@dataclass
class FeatureStats:
    total_points: int
    avg_points: float
    critical_count: int
    high_count: int
    in_progress_count: int


def _cost_by_end_month(features: Iterable[Feature]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for f in features:
        try:
            key = month_key(parse_date(f.end_date))
        except MalformedDateError:
            logger.warning("Skipping feature %s with malformed end date %r", f.id, f.end_date)
            continue
        totals[key] = totals.get(key, 0) + f.estimated_cost
    return totals


def monthly_financials(features: Iterable[Feature]) -> list[MonthlyFinancial]:
    """Payments per completion month with a running total.

    Only months in which some feature ends are emitted.
    """
    totals = _cost_by_end_month(features)
    result = []
    cumulative = 0
    for key in sorted(totals):
        cumulative += totals[key]
        result.append(
            MonthlyFinancial(
                month=month_label(key),
                payment=totals[key],
                cumulative=cumulative,
                key=key,
            )
        )
    return result


def financial_comparison(
    features: Iterable[Feature],
    run_rates: RunRateTable,
    system_filter: System | str = GLOBAL,
) -> list[FinancialComparison]:
    """Monthly run-rate burn against value delivered.

    Every year present in the run-rate table contributes all twelve months,
    whether or not any feature ends in them. ``diff`` is positive when the
    burn exceeds the delivered value.
    """
    budgets = _cost_by_end_month(features)
    burn: dict[str, float] = {}
    for year in run_rates.years():
        for month in range(12):
            key = f"{year}-{month + 1:02d}"
            if system_filter == GLOBAL:
                burn[key] = run_rates.total(year, month)
            else:
                burn[key] = run_rates.amount(year, month, System(system_filter))

    result = []
    for key in sorted(set(budgets) | set(burn)):
        budget = budgets.get(key, 0)
        run_rate = burn.get(key, 0)
        result.append(
            FinancialComparison(
                month=month_label(key),
                budget=budget,
                run_rate=run_rate,
                diff=run_rate - budget,
                key=key,
            )
        )
    return result


def program_financials(features: Iterable[Feature]) -> list[ProgramCost]:
    """Cost per program, most expensive first.

    A feature tagged with several programs splits its cost evenly between
    them; untagged features land in the Unassigned bucket.
    """
    totals: dict[str, float] = {}
    for f in features:
        programs = f.programs or [UNASSIGNED_PROGRAM]
        share = f.estimated_cost / len(programs)
        for program in programs:
            totals[program] = totals.get(program, 0) + share
    costs = [ProgramCost(name=name, cost=cost) for name, cost in totals.items()]
    return sorted(costs, key=lambda p: p.cost, reverse=True)


def _average_to_tenth(total: float, count: int) -> float:
    """Mean to one decimal place, halves rounded away from zero."""
    mean = Decimal(str(total)) / Decimal(count)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def feature_stats(features: Iterable[Feature]) -> FeatureStats:
    features = list(features)
    total = sum(f.points for f in features)
    return FeatureStats(
        total_points=total,
        avg_points=_average_to_tenth(total, len(features)) if features else 0,
        critical_count=sum(1 for f in features if f.priority is Priority.CRITICAL),
        high_count=sum(1 for f in features if f.priority is Priority.HIGH),
        in_progress_count=sum(1 for f in features if f.status is Status.IN_PROGRESS),
    )


def program_readiness(features: Iterable[Feature]) -> int:
    """Percentage of features that are completed."""
    features = list(features)
    if not features:
        return 0
    completed = sum(1 for f in features if f.status is Status.COMPLETED)
    return round(completed / len(features) * 100)


def annual_progress(features: Iterable[Feature], year: int) -> dict:
    """Completion of the features due to finish in a given year."""
    due = []
    for f in features:
        try:
            if parse_date(f.end_date).year == year:
                due.append(f)
        except MalformedDateError:
            continue
    completed = sum(1 for f in due if f.status is Status.COMPLETED)
    return {
        "year": year,
        "completed": completed,
        "total": len(due),
        "progress_pct": round(completed / len(due) * 100) if due else 0,
    }
