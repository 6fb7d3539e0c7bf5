"""
Chart builder for the Agro Dashboard application.

This module provides a class for drawing the two dashboard charts, the top
municipalities bar chart and the regional time series line chart, with a
consistent style. Figures are returned to the caller instead of being saved.
"""

import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import logging
from typing import Dict, Optional

from config.constants import (
    DEFAULT_COLOR_PALETTE,
    DEFAULT_FIGURE_HEIGHT,
    DEFAULT_FIGURE_WIDTH,
    METRIC_LABELS
)
from utils.data_processing import format_number

# Set up logger
logger = logging.getLogger(__name__)

class ChartBuilder:
    """
    Builder for the dashboard charts.

    Attributes:
        figure_width (float): Figure width in inches
        figure_height (float): Figure height in inches
        colors (dict): Colors for the bar and line series
    """

    def __init__(
        self,
        figure_width: float = DEFAULT_FIGURE_WIDTH,
        figure_height: float = DEFAULT_FIGURE_HEIGHT,
        colors: Optional[Dict[str, str]] = None
    ):
        self.figure_width = figure_width
        self.figure_height = figure_height
        self.colors = dict(DEFAULT_COLOR_PALETTE)
        if colors:
            self.colors.update(colors)

        self._set_default_style()

    def _set_default_style(self) -> None:
        """Set default visualization style."""
        sns.set_style("whitegrid")

        plt.rcParams.update({
            'font.size': 10,
            'axes.titlesize': 12,
            'axes.labelsize': 10,
            'xtick.labelsize': 9,
            'ytick.labelsize': 9,
            'legend.fontsize': 9
        })

    def _apply_value_axis_format(self, axis, max_value: float) -> str:
        """Scale large values on an axis and return the matching label suffix."""
        if max_value >= 1_000_000:
            axis.set_major_formatter(lambda x, pos: f'{format_number(x / 1_000_000, 1)}M')
            return ' (milhões)'
        if max_value >= 1_000:
            axis.set_major_formatter(lambda x, pos: f'{format_number(x / 1_000, 1)}K')
            return ' (milhares)'
        return ''

    def create_top_entities_chart(self, df: pd.DataFrame, metric: str) -> Optional[plt.Figure]:
        """
        Create the "Top municípios" bar chart.

        Args:
            df: DataFrame with 'name' and 'value' columns
            metric: Metric key used for the labels

        Returns:
            matplotlib Figure, or None when there is nothing to plot
        """
        if df is None or df.empty:
            return None

        fig, ax = plt.subplots(figsize=(self.figure_width, self.figure_height))

        # Positional bars: repeated names (e.g. the missing-name placeholder) stay separate
        positions = range(len(df))
        ax.bar(positions, df['value'], color=self.colors['bar'], alpha=0.8)
        ax.set_xticks(list(positions))
        ax.set_xticklabels(df['name'])

        label = METRIC_LABELS.get(metric, metric)
        suffix = self._apply_value_axis_format(ax.yaxis, float(df['value'].max()))

        ax.set_title(f"Top municípios – {metric}")
        ax.set_xlabel('')
        ax.set_ylabel(f"{label}{suffix}")
        ax.set_ylim(bottom=0)
        ax.tick_params(axis='x', labelrotation=45)
        fig.tight_layout()

        return fig

    def create_timeseries_chart(self, df: pd.DataFrame, region: str, metric: str) -> Optional[plt.Figure]:
        """
        Create the regional time series line chart.

        Args:
            df: DataFrame with 'year' and 'value' columns, in display order
            region: Region code shown in the title
            metric: Metric key used for the labels

        Returns:
            matplotlib Figure, or None when there is nothing to plot
        """
        if df is None or df.empty:
            return None

        fig, ax = plt.subplots(figsize=(self.figure_width, self.figure_height))

        positions = range(len(df))
        ax.plot(
            positions,
            df['value'],
            marker='o',
            markersize=3,
            linewidth=2,
            color=self.colors['line']
        )
        ax.fill_between(positions, df['value'], alpha=0.3, color=self.colors['line_fill'])

        ax.set_xticks(list(positions))
        ax.set_xticklabels(df['year'], rotation=45)

        label = METRIC_LABELS.get(metric, metric)
        suffix = self._apply_value_axis_format(ax.yaxis, float(df['value'].max()))

        ax.set_title(f"Série ({region or 'UF'}) – {metric}")
        ax.set_xlabel('Ano')
        ax.set_ylabel(f"{label}{suffix}")
        ax.set_ylim(bottom=0)
        fig.tight_layout()

        return fig
