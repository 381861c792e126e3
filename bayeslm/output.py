"""Write analysis tables and the rendered report to the output directory.

This module is the boundary between in-memory analysis and the files a
reader (or a publishing tool) picks up.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Mapping

import pandas as pd

from .reporting import format_summary_table, write_text

logger = logging.getLogger(__name__)


def save_outputs(
    summary: pd.DataFrame,
    ols_comparison: pd.DataFrame,
    ppc: Mapping[str, float],
    species_table: pd.DataFrame,
    report_text: str | None = None,
    output_dir: str = "output",
) -> Dict[str, str]:
    """Save posterior, reference, and predictive-check tables plus the report.

    Args:
        summary (pandas.DataFrame): Output of ``summarize_posterior``.
        ols_comparison (pandas.DataFrame): Output of ``compare_with_ols``.
        ppc (Mapping[str, float]): Output of ``posterior_predictive_check``.
        species_table (pandas.DataFrame): Output of ``describe_by_species``.
        report_text (str, optional): Rendered Markdown report.
        output_dir (str): Directory where outputs are written.

    Returns:
        dict[str, str]: Artifact name to written path.

    Note:
        The posterior summary CSV keeps full-precision numeric columns and adds
        SD-matched ``(reported)`` string columns beside them.
    """
    os.makedirs(output_dir, exist_ok=True)
    paths = {
        "posterior_summary": os.path.join(output_dir, "posterior_summary.csv"),
        "ols_reference": os.path.join(output_dir, "ols_reference.csv"),
        "posterior_predictive_check": os.path.join(
            output_dir, "posterior_predictive_check.csv"
        ),
        "species_summary": os.path.join(output_dir, "species_summary.csv"),
    }

    format_summary_table(summary).to_csv(paths["posterior_summary"], index=False)
    ols_comparison.to_csv(paths["ols_reference"], index=False)
    pd.DataFrame(
        {"Statistic": list(ppc.keys()), "Value": list(ppc.values())}
    ).to_csv(paths["posterior_predictive_check"], index=False)
    species_table.to_csv(paths["species_summary"], index=False)

    if report_text is not None:
        paths["report"] = write_text(report_text, os.path.join(output_dir, "report.md"))

    for name, path in paths.items():
        logger.info("Saved %s to %s", name.replace("_", " "), path)
    return paths
