from __future__ import annotations

import csv
import io
import re
from datetime import date
from typing import List, Optional, Sequence

from ..models.assumptions import AssumptionSet
from ..models.common import ProjectionModel, ScenarioLabel
from ..models.results import CalculatedMetrics
from .calculator import PROJECTION_YEARS


Row = List[str]


class ExportData(ProjectionModel):
    inputs: AssumptionSet
    metrics: CalculatedMetrics
    scenario: ScenarioLabel = ScenarioLabel.BASE


def format_number(value: float) -> str:
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def format_currency(value: float) -> str:
    return f"${format_number(value)}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def export_filename(model_name: str, scenario: Optional[ScenarioLabel] = None, extension: str = "csv") -> str:
    stem = re.sub(r"[^a-z0-9]+", "-", model_name.lower())
    if scenario is not None:
        stem = f"{stem}-{scenario.value}"
    stem = re.sub(r"-+", "-", stem)
    return f"{stem}.{extension}"


def key_metric_rows(data: ExportData) -> List[Row]:
    inputs, metrics = data.inputs, data.metrics
    return [
        ["Price per Unit", format_currency(inputs.price_per_unit)],
        ["Year 1 Units", format_number(inputs.units_sold_year1)],
        ["Growth Rate", format_percent(inputs.annual_growth_rate)],
        ["Gross Margin", format_percent(metrics.margins.gross)],
        ["Net Margin", format_percent(metrics.margins.net)],
        ["Break-even Month", str(metrics.break_even_month)],
        ["LTV:CAC Ratio", f"{metrics.ltv_cac_ratio:.2f}"],
    ]


def projection_rows(metrics: CalculatedMetrics) -> List[Row]:
    return [
        [
            f"Year {year + 1}",
            format_currency(metrics.revenue[year]),
            format_currency(metrics.gross_profit[year]),
            format_currency(metrics.net_profit[year]),
        ]
        for year in range(PROJECTION_YEARS)
    ]


def cost_structure_rows(inputs: AssumptionSet) -> List[Row]:
    rows = [[label, format_currency(amount)] for label, amount in inputs.costs.fixed_components()]
    rows.extend([item.name, format_currency(item.amount)] for item in inputs.costs.custom_costs)
    return rows


def marketing_rows(data: ExportData) -> List[Row]:
    marketing = data.metrics.marketing_metrics
    return [
        ["Customer Acquisition Cost", format_currency(marketing.cac)],
        ["Customer Lifetime Value", format_currency(marketing.ltv)],
        ["Monthly Churn Rate", format_percent(marketing.monthly_churn)],
        ["Organic Sales %", format_percent(marketing.organic_percentage)],
        ["Monthly Marketing Budget", format_currency(data.inputs.marketing.budget_allocation.total_budget)],
    ]


def build_csv_rows(data: ExportData, generated_on: Optional[date] = None) -> List[Row]:
    generated_on = generated_on or date.today()
    inputs = data.inputs
    rows: List[Row] = [
        ["Model Details"],
        ["Name", inputs.model_name],
        ["Description", inputs.model_description],
        ["Generated Date", generated_on.isoformat()],
        [],
        ["Key Metrics"],
        ["Metric", "Value"],
        *key_metric_rows(data),
        [],
        ["5-Year Financial Projections"],
        ["Year", "Revenue", "Gross Profit", "Net Profit"],
        *projection_rows(data.metrics),
        [],
        ["Cost Structure"],
        ["Component", "Cost per Unit"],
        *cost_structure_rows(inputs),
        [],
        ["Marketing Metrics"],
        ["Metric", "Value"],
        *marketing_rows(data),
    ]
    return rows


def render_csv(rows: Sequence[Row]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def export_to_csv(data: ExportData, generated_on: Optional[date] = None) -> str:
    return render_csv(build_csv_rows(data, generated_on))
