"""Mixin classes for result dataclasses.

This module provides the text formatting shared by all result summaries.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np


class ResultSummaryMixin:
    """Common formatting utilities for result summaries.

    Provides helper methods for generating human-readable reports with the
    same layout across all result types.
    """

    @staticmethod
    def _format_header(title: str, width: int = 80) -> str:
        """Format a section header.

        Args:
            title: Header title text
            width: Total width of the header

        Returns:
            Formatted header string with border
        """
        border = "=" * width
        padding = (width - len(title)) // 2
        return f"{border}\n{' ' * padding}{title}\n{border}"

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, bool):
            return "Yes" if value else "No"
        if isinstance(value, (float, np.floating)):
            value = float(value)
            if np.isinf(value):
                return "inf" if value > 0 else "-inf"
            if abs(value) < 0.0001 and value != 0:
                return f"{value:.4e}"
            if abs(value) >= 1000:
                return f"{value:,.2f}"
            return f"{value:.4f}"
        if value is None:
            return "N/A"
        return str(value)

    @staticmethod
    def _format_metric(label: str, value: Any, width: int = 40) -> str:
        """Format a metric label-value pair, dot-padded for alignment."""
        formatted = ResultSummaryMixin._format_value(value)
        dots = "." * max(1, width - len(label) - len(formatted) - 2)
        return f"  {label} {dots} {formatted}"

    @staticmethod
    def _format_footer(computation_time_ms: float, width: int = 80) -> str:
        """Format the report footer with computation time."""
        border = "=" * width
        if computation_time_ms < 1000:
            time_str = f"{computation_time_ms:.2f} ms"
        else:
            time_str = f"{computation_time_ms / 1000:.2f} s"
        return f"\nComputation Time: {time_str}\n{border}"

    @staticmethod
    def _format_section(title: str) -> str:
        return f"\n{title}:\n{'-' * len(title)}"

    @staticmethod
    def _format_table(
        row_labels: Sequence[str],
        column_labels: Sequence[str],
        values: np.ndarray,
        max_rows: int = 20,
        cell_width: int = 8,
    ) -> str:
        """Format a matrix with row and column labels.

        Rows beyond ``max_rows`` are elided with a trailing count.

        Args:
            row_labels: One label per matrix row
            column_labels: One label per matrix column
            values: 2D array of numbers
            max_rows: Maximum rows to print
            cell_width: Width of each numeric cell

        Returns:
            Formatted table string
        """
        label_width = max([len(str(r)) for r in row_labels] + [4])
        head = " " * (label_width + 2) + "".join(
            f"{str(c)[:cell_width]:>{cell_width}}" for c in column_labels
        )
        lines = [head]
        for label, row in list(zip(row_labels, values))[:max_rows]:
            cells = "".join(f"{float(v):>{cell_width}.3f}" for v in row)
            lines.append(f"  {str(label):<{label_width}}{cells}")
        if len(row_labels) > max_rows:
            lines.append(f"  ... and {len(row_labels) - max_rows} more DMU(s)")
        return "\n".join(lines)

    @staticmethod
    def _format_list(items: list, max_items: int = 5, item_name: str = "item") -> str:
        """Format a list with optional truncation."""
        if not items:
            return "  (none)"

        result = [f"  {i + 1}. {item}" for i, item in enumerate(items[:max_items])]
        if len(items) > max_items:
            remaining = len(items) - max_items
            result.append(f"  ... and {remaining} more {item_name}(s)")

        return "\n".join(result)
