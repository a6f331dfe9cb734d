"""Debt payoff calculators (avalanche and snowball).

The pipeline is a chain of pure functions:

    normalize_debts -> compute_aggregates -> order_debts -> simulate_payoff
    -> analyze_consolidation -> generate_insights

``calculate_debt_plan`` runs the whole chain and returns a fresh ``DebtPlan``.
Money math runs in ``Decimal``; results are exposed as floats.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Literal, Mapping, Optional, Sequence

from ..logging_config import get_logger
from ..models.debt import Debt, DebtType, PaymentStrategy, parse_flag
from .financial import FinancialRatios, calculate_monthly_payment, quantize_cents, to_decimal

logger = get_logger(__name__)

MAX_PAYOFF_MONTHS = 360  # 30 years; runaway debts stop here instead of looping forever
ASSUMED_TOTAL_CREDIT_LIMIT = 7500.0
CONSOLIDATION_TERM_YEARS = 3
STRATEGY_SAVINGS_THRESHOLD = 500.0

InsightType = Literal["success", "warning", "info"]


@dataclass(frozen=True, slots=True)
class DebtAggregates:
    """Portfolio-level figures derived from the debt list and income."""

    total_debt: float
    total_minimum_payment: float
    weighted_average_rate: float
    utilization_rate: float
    debt_service_ratio: float
    net_debt_burden: float
    tax_deductible_interest: float


@dataclass(slots=True)
class ScheduleEntry:
    """One simulated month for a single debt."""

    month: int
    payment: float
    principal: float
    interest: float
    remaining_balance: float
    total_interest_paid: float


@dataclass(slots=True)
class DebtProjection:
    """Simulator output for a single debt."""

    name: str
    schedule: list[ScheduleEntry]
    payoff_month: Optional[int]
    remaining_balance: float
    total_interest: float


@dataclass(slots=True)
class PayoffSimulation:
    months_to_payoff: int
    projections: list[DebtProjection]
    total_interest_paid: float
    reached_cap: bool


@dataclass(slots=True)
class DebtSummary:
    total_debt: float
    total_minimum_payment: float
    weighted_average_rate: float
    months_to_payoff: int
    debt_to_income: float
    total_interest_paid: float
    total_interest_saved: float
    tax_deductible_interest: float


@dataclass(slots=True)
class PayoffOrder:
    order: list[str]
    monthly_allocation: dict[str, float]
    projected_payoff_dates: dict[str, Optional[date]]


@dataclass(slots=True)
class ConsolidationAnalysis:
    is_recommended: bool = False
    potential_savings: float = 0.0
    monthly_payment_difference: float = 0.0
    new_payoff_months: int = 0


@dataclass(slots=True)
class DebtMetrics:
    utilization_rate: float
    debt_service_ratio: float
    net_debt_burden: float


@dataclass(slots=True)
class DebtDetail:
    """Per-debt projection plus the figures the UI shows next to it."""

    name: str
    original_balance: float
    current_balance: float
    monthly_payment: float
    interest_rate: float
    total_interest: float
    payoff_month: Optional[int]
    payoff_date: Optional[date]
    schedule: list[ScheduleEntry] = field(default_factory=list)


@dataclass(slots=True)
class Insight:
    type: InsightType
    message: str
    category: Optional[str] = None


@dataclass(slots=True)
class DebtPlan:
    """Complete result of one debt calculator run."""

    summary: DebtSummary
    payoff_strategy: PayoffOrder
    consolidation: ConsolidationAnalysis
    metrics: DebtMetrics
    debt_details: list[DebtDetail]
    insights: list[Insight]

    def detail_for(self, name: str) -> Optional[DebtDetail]:
        """Return the first detail entry matching *name*."""

        return next((detail for detail in self.debt_details if detail.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _clamp_rate(value: Any) -> Decimal:
    """Coerce an APR to Decimal and clamp it to 0-100."""

    return min(max(to_decimal(value), Decimal(0)), Decimal(100))


def normalize_debts(entries: Iterable[Debt | Mapping[str, Any]] | None) -> list[Debt]:
    """Coerce raw entries into clean ``Debt`` records.

    Non-numeric, non-finite and negative amounts become zero and rates are
    clamped to 0-100. Unknown debt types raise ``ValueError``.
    """

    normalized: list[Debt] = []
    for entry in entries or ():
        debt = entry if isinstance(entry, Debt) else Debt.from_mapping(entry)
        rate = _clamp_rate(debt.interest_rate)
        normalized.append(
            Debt(
                name=str(debt.name),
                balance=float(max(to_decimal(debt.balance), Decimal(0))),
                interest_rate=float(rate),
                minimum_payment=float(max(to_decimal(debt.minimum_payment), Decimal(0))),
                type=debt.type,
                is_deductible=parse_flag(debt.is_deductible),
            )
        )
    return normalized


def _percent_of(numerator: Decimal, denominator: Decimal) -> float:
    if denominator <= 0:
        return 0.0
    return float(numerator / denominator * Decimal(100))


def compute_aggregates(
    debts: Sequence[Debt],
    monthly_income: Any,
    *,
    credit_limit: float = ASSUMED_TOTAL_CREDIT_LIMIT,
) -> DebtAggregates:
    """Return totals, weighted rate, utilization and debt-service figures."""

    income = to_decimal(monthly_income)
    total = sum((to_decimal(d.balance) for d in debts), Decimal(0))
    total_minimum = sum((to_decimal(d.minimum_payment) for d in debts), Decimal(0))

    weighted = Decimal(0)
    if total > 0:
        weighted = (
            sum((to_decimal(d.balance) * to_decimal(d.interest_rate) for d in debts), Decimal(0))
            / total
        )

    revolving = sum(
        (to_decimal(d.balance) for d in debts if d.type is DebtType.CREDIT_CARD), Decimal(0)
    )
    deductible_interest = sum(
        (
            to_decimal(d.balance) * to_decimal(d.interest_rate) / Decimal(100)
            for d in debts
            if d.is_deductible
        ),
        Decimal(0),
    )

    return DebtAggregates(
        total_debt=float(total),
        total_minimum_payment=float(total_minimum),
        weighted_average_rate=float(weighted),
        utilization_rate=_percent_of(revolving, to_decimal(credit_limit)),
        debt_service_ratio=_percent_of(total_minimum, income),
        net_debt_burden=_percent_of(total, income * 12),
        tax_deductible_interest=float(quantize_cents(deductible_interest)),
    )


def order_debts(debts: Iterable[Debt], strategy: PaymentStrategy | str) -> list[Debt]:
    """Return debts in payoff priority order; ties keep input order."""

    strategy = PaymentStrategy.parse(strategy)
    if strategy is PaymentStrategy.AVALANCHE:
        return sorted(debts, key=lambda d: d.interest_rate, reverse=True)
    return sorted(debts, key=lambda d: d.balance)


def simulate_payoff(
    ordered: Sequence[Debt],
    extra_payment: Any,
    *,
    max_months: int = MAX_PAYOFF_MONTHS,
) -> PayoffSimulation:
    """Project month-by-month payoff for debts already in strategy order.

    Each month every open debt accrues ``rate / 12`` interest and receives its
    minimum. The first open debt also receives the extra pool: the extra
    payment plus the minimums of debts already cleared. Overpayment in a
    payoff month flows on to the next open debt in the same month.
    """

    extra = max(to_decimal(extra_payment), Decimal(0))
    balances = [to_decimal(d.balance) for d in ordered]
    minimums = [to_decimal(d.minimum_payment) for d in ordered]
    monthly_rates = [to_decimal(d.interest_rate) / Decimal(1200) for d in ordered]
    interest_totals = [Decimal(0) for _ in ordered]
    schedules: list[list[ScheduleEntry]] = [[] for _ in ordered]
    payoff_months: list[Optional[int]] = [0 if b <= 0 else None for b in balances]

    # Debts that start at zero free their minimums from the first month.
    rolled_minimums = sum(
        (m for m, b in zip(minimums, balances) if b <= 0), Decimal(0)
    )

    month = 0
    while month < max_months and any(b > 0 for b in balances):
        month += 1
        pool = extra + rolled_minimums

        for idx, balance in enumerate(balances):
            if balance <= 0:
                continue

            interest = quantize_cents(balance * monthly_rates[idx])
            payment = minimums[idx] + pool
            pool = Decimal(0)
            owed = balance + interest

            if payment >= owed:
                pool = payment - owed
                payment = owed
                balance = Decimal(0)
                rolled_minimums += minimums[idx]
                payoff_months[idx] = month
            else:
                balance = owed - payment

            balances[idx] = balance
            interest_totals[idx] += interest
            schedules[idx].append(
                ScheduleEntry(
                    month=month,
                    payment=float(payment),
                    principal=float(payment - interest),
                    interest=float(interest),
                    remaining_balance=float(balance),
                    total_interest_paid=float(interest_totals[idx]),
                )
            )

    reached_cap = any(b > 0 for b in balances)

    projections = [
        DebtProjection(
            name=debt.name,
            schedule=schedules[idx],
            payoff_month=payoff_months[idx],
            remaining_balance=float(balances[idx]),
            total_interest=float(interest_totals[idx]),
        )
        for idx, debt in enumerate(ordered)
    ]
    return PayoffSimulation(
        months_to_payoff=month,
        projections=projections,
        total_interest_paid=float(sum(interest_totals, Decimal(0))),
        reached_cap=reached_cap,
    )


def first_month_allocation(ordered: Sequence[Debt], extra_payment: Any) -> dict[str, float]:
    """Return what each debt is planned to receive in month one.

    Minimums go to every debt; the extra payment (plus minimums freed by debts
    that are already at zero) goes to the first open debt. Values always sum
    to total minimums plus extra. Duplicate names share one key.
    """

    extra = max(to_decimal(extra_payment), Decimal(0))
    amounts = [to_decimal(d.minimum_payment) for d in ordered]
    open_indexes = [idx for idx, d in enumerate(ordered) if to_decimal(d.balance) > 0]

    head = 0
    if open_indexes:
        head = open_indexes[0]
        for idx, debt in enumerate(ordered):
            if to_decimal(debt.balance) <= 0:
                amounts[head] += amounts[idx]
                amounts[idx] = Decimal(0)
    if ordered:
        amounts[head] += extra

    allocation: dict[str, Decimal] = {}
    for debt, amount in zip(ordered, amounts):
        allocation[debt.name] = allocation.get(debt.name, Decimal(0)) + amount
    return {name: float(amount) for name, amount in allocation.items()}


def analyze_consolidation(
    *,
    total_debt: float,
    weighted_average_rate: float,
    total_minimum_payment: float,
    consolidation_rate: Optional[float],
    term_years: int = CONSOLIDATION_TERM_YEARS,
) -> ConsolidationAnalysis:
    """Compare the current weighted rate against a consolidation loan.

    Savings are the interest difference on the total balance over the
    consolidation term and are never negative.
    """

    if consolidation_rate is None:
        return ConsolidationAnalysis()

    rate = _clamp_rate(consolidation_rate)
    current_rate = _clamp_rate(weighted_average_rate)
    is_recommended = rate < current_rate
    months = term_years * 12

    consolidated_payment = calculate_monthly_payment(total_debt, rate, term_years)
    current_payment = calculate_monthly_payment(total_debt, current_rate, term_years)

    savings = 0.0
    if is_recommended:
        savings = max((current_payment - consolidated_payment) * months, 0.0)

    return ConsolidationAnalysis(
        is_recommended=is_recommended,
        potential_savings=round(savings, 2),
        monthly_payment_difference=round(consolidated_payment - float(total_minimum_payment), 2),
        new_payoff_months=months,
    )


def compare_strategies(debts: Sequence[Debt], extra_payment: Any) -> dict[PaymentStrategy, float]:
    """Return total projected interest for each strategy."""

    return {
        strategy: simulate_payoff(order_debts(debts, strategy), extra_payment).total_interest_paid
        for strategy in PaymentStrategy
    }


def generate_insights(
    *,
    debts: Sequence[Debt],
    aggregates: DebtAggregates,
    consolidation: ConsolidationAnalysis,
    strategy: PaymentStrategy | str = PaymentStrategy.AVALANCHE,
    strategy_savings: float = 0.0,
) -> list[Insight]:
    """Map computed figures to advisory messages, most urgent first."""

    insights: list[Insight] = []

    dti = aggregates.debt_service_ratio
    if dti > FinancialRatios.MAX_DTI:
        insights.append(
            Insight(
                type="warning",
                message=f"Debt-to-income ratio ({dti:.1f}%) exceeds recommended maximum",
                category="debt-to-income",
            )
        )

    utilization = aggregates.utilization_rate
    if utilization > FinancialRatios.MAX_CREDIT_UTILIZATION:
        insights.append(
            Insight(
                type="warning",
                message=f"High credit utilization ({utilization:.1f}%) may impact credit score",
                category="credit-utilization",
            )
        )

    if (
        PaymentStrategy.parse(strategy) is PaymentStrategy.AVALANCHE
        and strategy_savings > STRATEGY_SAVINGS_THRESHOLD
    ):
        insights.append(
            Insight(
                type="success",
                message=f"Current avalanche strategy saves ${strategy_savings:,.0f} in interest",
                category="strategy",
            )
        )

    if consolidation.is_recommended:
        insights.append(
            Insight(
                type="info",
                message=f"Debt consolidation could save ${consolidation.potential_savings:,.0f}",
                category="consolidation",
            )
        )

    for debt in debts:
        if debt.interest_rate > FinancialRatios.HIGH_INTEREST_APR:
            insights.append(
                Insight(
                    type="warning",
                    message=(
                        f"Consider refinancing {debt.name} to reduce "
                        f"{debt.interest_rate:g}% interest rate"
                    ),
                    category="high-interest",
                )
            )

    if any(debt.is_deductible for debt in debts):
        insights.append(
            Insight(
                type="info",
                message=(
                    f"${aggregates.tax_deductible_interest:,.0f} in tax-deductible interest this year"
                ),
                category="tax",
            )
        )

    return insights


def _add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    return start.replace(year=start.year + month_index // 12, month=month_index % 12 + 1, day=1)


def calculate_debt_plan(
    debts: Iterable[Debt | Mapping[str, Any]] | None,
    *,
    monthly_income: Any = 0,
    extra_payment: Any = 0,
    payment_strategy: PaymentStrategy | str = PaymentStrategy.AVALANCHE,
    consolidation_rate: Optional[float] = None,
    start: Optional[date] = None,
) -> DebtPlan:
    """Run the full payoff pipeline and return a fresh result."""

    strategy = PaymentStrategy.parse(payment_strategy)
    normalized = normalize_debts(debts)
    aggregates = compute_aggregates(normalized, monthly_income)
    ordered = order_debts(normalized, strategy)
    simulation = simulate_payoff(ordered, extra_payment)
    if simulation.reached_cap:
        logger.warning(
            "Payoff simulation reached the month cap",
            extra={
                "max_months": simulation.months_to_payoff,
                "open_debts": sum(1 for p in simulation.projections if p.payoff_month is None),
            },
        )

    baseline_interest = simulate_payoff(ordered, 0).total_interest_paid
    interest_saved = max(baseline_interest - simulation.total_interest_paid, 0.0)

    strategy_savings = 0.0
    if strategy is PaymentStrategy.AVALANCHE and normalized:
        totals = compare_strategies(normalized, extra_payment)
        strategy_savings = totals[PaymentStrategy.SNOWBALL] - totals[PaymentStrategy.AVALANCHE]

    consolidation = analyze_consolidation(
        total_debt=aggregates.total_debt,
        weighted_average_rate=aggregates.weighted_average_rate,
        total_minimum_payment=aggregates.total_minimum_payment,
        consolidation_rate=consolidation_rate,
    )

    start_month = (start or date.today()).replace(day=1)
    allocation = first_month_allocation(ordered, extra_payment)
    details: list[DebtDetail] = []
    payoff_dates: dict[str, Optional[date]] = {}
    for debt, projection in zip(ordered, simulation.projections):
        payoff_date = (
            _add_months(start_month, projection.payoff_month)
            if projection.payoff_month is not None
            else None
        )
        first_payment = projection.schedule[0].payment if projection.schedule else 0.0
        details.append(
            DebtDetail(
                name=debt.name,
                original_balance=debt.balance,
                current_balance=projection.remaining_balance,
                monthly_payment=first_payment,
                interest_rate=debt.interest_rate,
                total_interest=projection.total_interest,
                payoff_month=projection.payoff_month,
                payoff_date=payoff_date,
                schedule=projection.schedule,
            )
        )
        payoff_dates.setdefault(debt.name, payoff_date)

    insights = generate_insights(
        debts=normalized,
        aggregates=aggregates,
        consolidation=consolidation,
        strategy=strategy,
        strategy_savings=strategy_savings,
    )

    logger.debug(
        "Debt plan computed",
        extra={
            "debts": len(normalized),
            "strategy": strategy.value,
            "months_to_payoff": simulation.months_to_payoff,
        },
    )

    return DebtPlan(
        summary=DebtSummary(
            total_debt=aggregates.total_debt,
            total_minimum_payment=aggregates.total_minimum_payment,
            weighted_average_rate=aggregates.weighted_average_rate,
            months_to_payoff=simulation.months_to_payoff,
            debt_to_income=aggregates.debt_service_ratio,
            total_interest_paid=simulation.total_interest_paid,
            total_interest_saved=round(interest_saved, 2),
            tax_deductible_interest=aggregates.tax_deductible_interest,
        ),
        payoff_strategy=PayoffOrder(
            order=[debt.name for debt in ordered],
            monthly_allocation=allocation,
            projected_payoff_dates=payoff_dates,
        ),
        consolidation=consolidation,
        metrics=DebtMetrics(
            utilization_rate=aggregates.utilization_rate,
            debt_service_ratio=aggregates.debt_service_ratio,
            net_debt_burden=aggregates.net_debt_burden,
        ),
        debt_details=details,
        insights=insights,
    )


__all__ = [
    "ASSUMED_TOTAL_CREDIT_LIMIT",
    "MAX_PAYOFF_MONTHS",
    "ConsolidationAnalysis",
    "DebtAggregates",
    "DebtDetail",
    "DebtMetrics",
    "DebtPlan",
    "DebtSummary",
    "Insight",
    "PayoffOrder",
    "PayoffSimulation",
    "ScheduleEntry",
    "analyze_consolidation",
    "calculate_debt_plan",
    "compare_strategies",
    "compute_aggregates",
    "first_month_allocation",
    "generate_insights",
    "normalize_debts",
    "order_debts",
    "simulate_payoff",
]
