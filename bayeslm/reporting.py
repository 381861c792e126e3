"""Format posterior tables and render the Markdown walkthrough report.

Values are reported to the precision their posterior standard deviation
supports: the SD is rounded to one significant figure (two when its leading
digit is 1) and the paired value is given the same number of decimals.
"""

from __future__ import annotations

import os
from typing import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from .schema import SUMMARY


def _round_uncertainty(uncertainty: float) -> tuple[float, int]:
    """Round an uncertainty to one significant figure, two for leading digit 1.

    Args:
        uncertainty (float): Absolute uncertainty value.

    Returns:
        tuple[float, int]: Rounded uncertainty and decimal places used.

    Raises:
        ValueError: If uncertainty is non-finite or non-positive.
    """
    u = float(uncertainty)
    if not np.isfinite(u) or u <= 0:
        raise ValueError(f"Uncertainty must be finite and > 0, got {uncertainty!r}")

    exponent = int(np.floor(np.log10(abs(u))))
    leading = abs(u) / (10**exponent)
    sig_figs = 2 if 1.0 <= leading < 2.0 else 1
    ndigits = sig_figs - 1 - exponent
    rounded_u = round(abs(u), ndigits)
    return float(rounded_u), int(max(0, ndigits))


def uncertainty_decimal_places(uncertainty: float) -> int:
    """Return decimal places implied by rounding ``uncertainty``.

    Args:
        uncertainty (float): Absolute uncertainty of a reported value, such as
            a posterior SD, in the unit of the value.

    Returns:
        int: Number of decimal places that the paired value should use.
    """
    rounded_u, ndigits = _round_uncertainty(uncertainty)
    if ndigits <= 0:
        return 0
    txt = f"{rounded_u:.12f}".rstrip("0")
    if "." not in txt:
        return 0
    return len(txt.split(".", 1)[1])


def format_value_to_uncertainty_decimals(value: float, uncertainty: float) -> str:
    """Format a value using decimal places implied by its uncertainty.

    Note:
        Intended for reporting only; numeric columns are kept unrounded for
        downstream calculations.
    """
    dp = uncertainty_decimal_places(uncertainty)
    return f"{float(value):.{dp}f}"


def validate_uncertainty_columns(
    df: pd.DataFrame,
    value_uncertainty_pairs: Iterable[tuple[str, str]],
) -> None:
    """Validate value/uncertainty column pairs before formatting.

    Raises:
        KeyError: If any required value or uncertainty column is missing.
        ValueError: If a finite value exists in a row where uncertainty is
            missing, non-finite, or non-positive.
    """
    for value_col, unc_col in value_uncertainty_pairs:
        if value_col not in df.columns:
            raise KeyError(f"Missing value column '{value_col}' for reporting format.")
        if unc_col not in df.columns:
            raise KeyError(
                f"Missing uncertainty column '{unc_col}' required for '{value_col}'."
            )

        values = pd.to_numeric(df[value_col], errors="coerce")
        uncs = pd.to_numeric(df[unc_col], errors="coerce")
        missing_mask = values.notna() & (~np.isfinite(uncs) | (uncs <= 0))

        if bool(missing_mask.any()):
            bad_rows = list(df.index[missing_mask][:5])
            raise ValueError(
                "Uncertainty metadata missing/invalid for values in "
                f"'{value_col}' (uncertainty '{unc_col}'). "
                f"Example row indices: {bad_rows}."
            )


def add_formatted_reporting_columns(
    df: pd.DataFrame,
    value_uncertainty_pairs: Sequence[tuple[str, str]],
    suffix: str = " (reported)",
) -> pd.DataFrame:
    """Add reporting-ready string columns for values and their uncertainties.

    Args:
        df (pandas.DataFrame): Input numeric table.
        value_uncertainty_pairs (Sequence[tuple[str, str]]): ``(value_column,
            uncertainty_column)`` pairs to format. A value column may be paired
            with the same uncertainty column more than once (for example,
            interval bounds formatted with the posterior SD).
        suffix (str, optional): Suffix appended to generated columns.

    Returns:
        pandas.DataFrame: Copy of ``df`` with formatted string columns added.

    Raises:
        KeyError: If required value/uncertainty columns are absent.
        ValueError: If uncertainty metadata is invalid for finite values.
    """
    out = df.copy()
    validate_uncertainty_columns(out, value_uncertainty_pairs)

    for value_col, unc_col in value_uncertainty_pairs:
        values = pd.to_numeric(out[value_col], errors="coerce")
        uncs = pd.to_numeric(out[unc_col], errors="coerce")

        out[f"{value_col}{suffix}"] = [
            (
                format_value_to_uncertainty_decimals(v, u)
                if (np.isfinite(v) and np.isfinite(u) and u > 0)
                else ""
            )
            for v, u in zip(values, uncs)
        ]
        out[f"{unc_col}{suffix}"] = [
            (
                f"{_round_uncertainty(u)[0]:.{uncertainty_decimal_places(u)}f}"
                if (np.isfinite(u) and u > 0)
                else ""
            )
            for u in uncs
        ]

    return out


def format_summary_table(summary: pd.DataFrame) -> pd.DataFrame:
    """Return the posterior summary with SD-matched string columns added."""
    return add_formatted_reporting_columns(
        summary,
        [
            (SUMMARY.mean, SUMMARY.sd),
            (SUMMARY.ci_lower, SUMMARY.sd),
            (SUMMARY.ci_upper, SUMMARY.sd),
        ],
    )


def _markdown_table(df: pd.DataFrame, columns: Sequence[str]) -> str:
    header = "| " + " | ".join(columns) + " |"
    rule = "| " + " | ".join("---" for _ in columns) + " |"
    lines = [header, rule]
    for _, row in df.iterrows():
        cells = []
        for col in columns:
            value = row[col]
            if isinstance(value, (float, np.floating)):
                cells.append("" if not np.isfinite(value) else f"{value:.3f}")
            else:
                cells.append(str(value))
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


def _yaml_scalar(value: object) -> str:
    text = str(value).replace('"', '\\"')
    return f'"{text}"'


def render_front_matter(metadata: Mapping[str, object]) -> str:
    """Render a YAML front-matter block for a publishing tool.

    Sequence values become YAML lists; everything else is a quoted scalar.
    """
    lines = ["---"]
    for key, value in metadata.items():
        if isinstance(value, (list, tuple)):
            lines.append(f"{key}:")
            lines.extend(f"  - {_yaml_scalar(item)}" for item in value)
        else:
            lines.append(f"{key}: {_yaml_scalar(value)}")
    lines.append("---")
    return "\n".join(lines)


def render_report(
    metadata: Mapping[str, object],
    *,
    formula: str,
    prior: str,
    sampler: Mapping[str, object],
    species_table: pd.DataFrame,
    summary: pd.DataFrame,
    ols_comparison: pd.DataFrame,
    ppc: Mapping[str, float],
    interpretation: Sequence[str],
    failing_rhat: Sequence[str],
    figures: Mapping[str, str],
    prior_predictive: Mapping[str, float] | None = None,
) -> str:
    """Render the full walkthrough as Markdown with front matter.

    Args:
        metadata (Mapping[str, object]): Front matter (title, author, date,
            categories, image).
        formula (str): Model formula as fitted.
        prior (str): Coefficient prior in textual form.
        sampler (Mapping[str, object]): ``chains``, ``iterations``,
            ``warmup`` and ``seed``.
        species_table (pandas.DataFrame): Output of ``describe_by_species``.
        summary (pandas.DataFrame): Posterior summary.
        ols_comparison (pandas.DataFrame): Output of ``compare_with_ols``.
        ppc (Mapping[str, float]): Posterior predictive statistics.
        interpretation (Sequence[str]): Sentences from ``interpret_effects``.
        failing_rhat (Sequence[str]): Parameters failing the R-hat check.
        figures (Mapping[str, str]): Figure key to path, relative to the
            report.
        prior_predictive (Mapping[str, float], optional): Prior predictive
            summary.

    Returns:
        str: Markdown document ending with a newline.
    """
    ci_prob = summary.attrs.get("ci_prob", 0.95)
    reported = format_summary_table(summary)
    suffix = " (reported)"
    table_cols = [
        SUMMARY.parameter,
        SUMMARY.mean + suffix,
        SUMMARY.sd + suffix,
        SUMMARY.ci_lower + suffix,
        SUMMARY.ci_upper + suffix,
        SUMMARY.rhat,
        SUMMARY.ess_bulk,
    ]

    parts = [render_front_matter(metadata), ""]
    parts += [
        "## Bayes' rule",
        "",
        "The posterior distribution of the parameters is proportional to the "
        "likelihood of the data times the prior: "
        "p(theta | y) is proportional to p(y | theta) p(theta). "
        "The prior states what we believe before seeing the data, the likelihood "
        "scores how well each parameter value explains the observations, and "
        "the posterior combines both.",
        "",
        "## Data",
        "",
        "Fisher's iris measurements: 3 species x 50 flowers, four numeric features "
        "in cm.",
        "",
        _markdown_table(species_table, list(species_table.columns)),
        "",
    ]
    if "feature_histograms" in figures:
        parts += [f"![Feature histograms]({figures['feature_histograms']})", ""]

    parts += [
        "## Prior and model",
        "",
        f"Model: `{formula}` with Gaussian residuals. "
        f"Each regression coefficient gets the weakly-informative prior `{prior}`.",
        "",
    ]
    if prior_predictive:
        parts += [
            "Simulating from the prior alone gives responses with a 95% range of "
            f"[{prior_predictive['prior_predictive_q025']:.1f}, "
            f"{prior_predictive['prior_predictive_q975']:.1f}], far wider than the "
            f"observed [{prior_predictive['observed_min']:.1f}, "
            f"{prior_predictive['observed_max']:.1f}]: the prior constrains little.",
            "",
        ]

    parts += [
        "## Fitting",
        "",
        f"NUTS sampling with {sampler['chains']} chains of {sampler['iterations']} "
        f"iterations ({sampler['warmup']} warm-up), seed {sampler['seed']}.",
        "",
        "## Posterior",
        "",
        f"Posterior means with {ci_prob:.0%} equal-tailed credible intervals:",
        "",
        _markdown_table(reported, table_cols),
        "",
    ]
    if failing_rhat:
        parts += [
            f"**Warning:** R-hat is outside tolerance for {', '.join(failing_rhat)}; "
            "the chains may not have converged.",
            "",
        ]
    else:
        parts += ["All R-hat values are close to 1.0: the chains agree.", ""]
    parts += [f"- {sentence}" for sentence in interpretation] + [""]
    parts += [
        "Least-squares estimates for comparison:",
        "",
        _markdown_table(ols_comparison, list(ols_comparison.columns)),
        "",
    ]
    for key, caption in (
        ("posterior_distributions", "Posterior distributions"),
        ("trace", "Trace plot"),
    ):
        if key in figures:
            parts += [f"![{caption}]({figures[key]})", ""]

    parts += [
        "## Posterior predictive check",
        "",
        f"Simulated mean {ppc['simulated_mean']:.3f} vs observed "
        f"{ppc['observed_mean']:.3f} (Bayesian p = {ppc['mean_p_value']:.2f}); "
        f"simulated variance {ppc['simulated_variance']:.3f} vs observed "
        f"{ppc['observed_variance']:.3f} (Bayesian p = {ppc['variance_p_value']:.2f}).",
        "",
    ]
    if "posterior_predictive_check" in figures:
        parts += [
            f"![Posterior predictive check]({figures['posterior_predictive_check']})",
            "",
        ]

    return "\n".join(parts).rstrip() + "\n"


def write_text(text: str, path: str) -> str:
    """Write ``text`` to ``path`` as UTF-8, creating parent folders."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)
    return path
