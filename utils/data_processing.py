"""
Focus on the small amount of shaping the dashboard needs:
- Numeric coercion of loosely typed API values
- Brazilian number formatting
- Converting API results to DataFrames for charts and the table
"""

import numbers

import pandas as pd
import numpy as np
from typing import Any, Optional
import logging

from config.constants import MISSING_LABEL, MISSING_VALUE
from models.data_models import Choropleth, Overview, TimeSeries

logger = logging.getLogger(__name__)

TABLE_COLUMNS = {
    'municipality': 'Município',
    'region': 'UF',
    'area_ha': 'Área (ha)',
    'producao_t': 'Produção (t)',
    'valor_mil_reais': 'Valor (mil R$)'
}

def to_number(value: Any) -> float:
    """
    Coerce an API value to a float.

    Missing, non-numeric and non-finite values count as zero, so a
    municipality without data looks the same as one with an observed zero.
    Booleans follow their numeric value (True is 1.0).

    Args:
        value: Raw JSON value

    Returns:
        float value, 0.0 when the input is not a usable number
    """
    if value is None:
        return 0.0

    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0

    return number if np.isfinite(number) else 0.0

def format_number(value: Any, max_decimals: int = 3) -> str:
    """
    Format a number the pt-BR way: "." for thousands, "," for decimals.

    Args:
        value: Number to format; None gives the missing-value placeholder
        max_decimals: Maximum number of decimals kept

    Returns:
        Formatted string
    """
    if value is None:
        return MISSING_VALUE

    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)

    if not np.isfinite(number):
        return str(value)

    text = f"{number:,.{max_decimals}f}"
    if max_decimals > 0:
        text = text.rstrip('0').rstrip('.')
    if text in ('-0', ''):
        text = '0'

    # Swap separators through a placeholder
    return text.replace(',', '_').replace('.', ',').replace('_', '.')

def top_entities_frame(overview: Optional[Overview]) -> pd.DataFrame:
    """
    Build the bar chart data from the overview.

    Returns:
        DataFrame with 'name' and 'value' columns, empty if there is nothing to plot
    """
    if overview is None or not overview.top_entities:
        return pd.DataFrame(columns=['name', 'value'])

    return pd.DataFrame({
        'name': [e.name if e.name is not None else MISSING_LABEL for e in overview.top_entities],
        'value': [to_number(e.value) for e in overview.top_entities]
    })

def timeseries_frame(timeseries: Optional[TimeSeries]) -> pd.DataFrame:
    """
    Build the line chart data from a time series, keeping the API order.

    Returns:
        DataFrame with 'year' and 'value' columns
    """
    if timeseries is None or not timeseries.points:
        return pd.DataFrame(columns=['year', 'value'])

    return pd.DataFrame({
        'year': [str(p.year) if p.year is not None else MISSING_LABEL for p in timeseries.points],
        'value': [to_number(p.value) for p in timeseries.points]
    })

def choropleth_table(choropleth: Optional[Choropleth], limit: int) -> pd.DataFrame:
    """
    Build the municipality table, formatted for display.

    Args:
        choropleth: Result of the choropleth call
        limit: Maximum number of rows

    Returns:
        DataFrame with display column names, at most ``limit`` rows
    """
    if choropleth is None or not choropleth.rows:
        return pd.DataFrame(columns=list(TABLE_COLUMNS.values()))

    records = []
    for row in choropleth.rows[:max(limit, 0)]:
        records.append({
            TABLE_COLUMNS['municipality']: row.municipality,
            TABLE_COLUMNS['region']: row.region,
            TABLE_COLUMNS['area_ha']: format_number(row.area_ha),
            TABLE_COLUMNS['producao_t']: format_number(row.producao_t),
            TABLE_COLUMNS['valor_mil_reais']: format_number(row.valor_mil_reais)
        })

    logger.debug(f"Table built with {len(records)} of {len(choropleth.rows)} rows")
    return pd.DataFrame(records, columns=list(TABLE_COLUMNS.values()))
