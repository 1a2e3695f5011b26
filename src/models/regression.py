"""
Fitting and interpreting regression models.

Covers the interpretation side of the walkthroughs:
- fit_formula: linear (gaussian) or logistic (binomial) models from a formula
- tidy / glance: coefficient table and one-row model summary
- likelihood_ratio_test: compare nested fits, e.g. with/without interaction
- fit_by_group: one model per level of a grouping column
- fit_mixed / tidy_mixed: random-intercept (or slope) linear mixed model
- data_grid / seq_range / add_predictions / add_residuals: prediction grids
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from pandas.api.types import CategoricalDtype
from scipy import stats

from src.data.tables import require_columns
from src.exceptions import InvalidParameter
from src.models.formula import check_formula_columns

logger = logging.getLogger(__name__)

FAMILIES = ("gaussian", "binomial")


def fit_formula(formula: str, data: pd.DataFrame, family: str = "gaussian"):
    """Fit a linear or logistic regression.

    Args:
        formula: patsy formula, e.g. "y ~ x * C(group)".
        data: Table with every formula variable.
        family: "gaussian" (OLS) or "binomial" (logit, 0/1 response).

    Returns:
        Fitted statsmodels results object.

    Raises:
        InvalidParameter: If family is unknown.
        MissingColumn: If a formula variable is absent.
    """
    if family not in FAMILIES:
        raise InvalidParameter(f"Unknown family: {family}. Supported: {list(FAMILIES)}")
    check_formula_columns(formula, data)

    if family == "gaussian":
        result = smf.ols(formula, data=data).fit()
    else:
        result = smf.logit(formula, data=data).fit(disp=0)

    logger.debug("Fitted %s (%s) on %d rows", formula, family, int(result.nobs))
    return result


def tidy(result, conf_level: float = 0.95, exponentiate: bool = False) -> pd.DataFrame:
    """Coefficient table of a fitted model.

    Args:
        result: statsmodels results object.
        conf_level: Confidence level for the interval columns.
        exponentiate: Report exp(estimate) and exp(interval), i.e. odds
            ratios for a logistic fit. Standard errors stay on the link scale.

    Returns:
        DataFrame with term, estimate, std_error, statistic, p_value,
        conf_low, conf_high.
    """
    if not 0.0 < conf_level < 1.0:
        raise InvalidParameter(f"conf_level must be in (0, 1), got {conf_level}")

    conf = result.conf_int(alpha=1.0 - conf_level)
    table = pd.DataFrame({
        "term": result.params.index,
        "estimate": result.params.values,
        "std_error": np.asarray(result.bse),
        "statistic": np.asarray(result.tvalues),
        "p_value": np.asarray(result.pvalues),
        "conf_low": np.asarray(conf.iloc[:, 0]),
        "conf_high": np.asarray(conf.iloc[:, 1]),
    })

    if exponentiate:
        for col in ["estimate", "conf_low", "conf_high"]:
            table[col] = np.exp(table[col])

    return table.reset_index(drop=True)


def glance(result) -> pd.DataFrame:
    """One-row summary of a fitted model."""
    row: Dict[str, Any] = {
        "nobs": int(result.nobs),
        "aic": float(result.aic),
        "bic": float(result.bic),
        "log_likelihood": float(result.llf),
    }
    if hasattr(result, "rsquared"):
        row["r_squared"] = float(result.rsquared)
        row["adj_r_squared"] = float(result.rsquared_adj)
    elif hasattr(result, "prsquared"):
        row["pseudo_r_squared"] = float(result.prsquared)
    return pd.DataFrame([row])


def likelihood_ratio_test(restricted, full) -> Dict[str, float]:
    """Likelihood-ratio test of a restricted model against a larger one.

    Both models must be fitted to the same rows, with the restricted model
    nested in the full one.

    Returns:
        Dict with statistic, df and p_value.
    """
    if int(restricted.nobs) != int(full.nobs):
        raise InvalidParameter(
            f"Models were fitted on different rows ({int(restricted.nobs)} vs {int(full.nobs)})"
        )
    df = float(full.df_model - restricted.df_model)
    if df <= 0:
        raise InvalidParameter("full model must have more parameters than the restricted model")

    statistic = max(0.0, 2.0 * float(full.llf - restricted.llf))
    return {
        "statistic": statistic,
        "df": df,
        "p_value": float(stats.chi2.sf(statistic, df)),
    }


def fit_each_group(
    data: pd.DataFrame,
    group: str,
    formula: str,
    family: str = "gaussian",
) -> Dict[Any, Any]:
    """Fit the same formula separately within each level of group.

    Returns:
        Dict mapping group level -> fitted results, in sorted level order.
    """
    require_columns(data, [group])
    check_formula_columns(formula, data)

    fits = {}
    for level, subset in data.groupby(group, observed=True, sort=True):
        fits[level] = fit_formula(formula, subset, family=family)
    logger.info("Fitted %s within %d levels of %s", formula, len(fits), group)
    return fits


def fit_by_group(
    data: pd.DataFrame,
    group: str,
    formula: str,
    family: str = "gaussian",
    conf_level: float = 0.95,
) -> pd.DataFrame:
    """Fit one model per group level and stack their coefficient tables.

    Returns:
        tidy() columns with a leading column named after group.
    """
    fits = fit_each_group(data, group, formula, family=family)
    tables = []
    for level, result in fits.items():
        table = tidy(result, conf_level=conf_level)
        table.insert(0, group, level)
        tables.append(table)
    return pd.concat(tables, ignore_index=True)


def fit_mixed(
    formula: str,
    data: pd.DataFrame,
    groups: str,
    re_formula: str | None = None,
    reml: bool = True,
):
    """Fit a linear mixed model with random effects by groups.

    Args:
        formula: Fixed-effects formula, e.g. "y ~ x".
        data: Input table.
        groups: Column defining the clusters.
        re_formula: Random-effects formula; None gives a random intercept,
            "~x" adds a random slope for x.
        reml: Use restricted maximum likelihood.

    Returns:
        Fitted statsmodels MixedLMResults.
    """
    require_columns(data, [groups])
    check_formula_columns(formula, data)
    if re_formula is not None:
        check_formula_columns(re_formula, data)

    model = smf.mixedlm(formula, data=data, groups=data[groups], re_formula=re_formula)
    result = model.fit(reml=reml)
    logger.debug("Fitted mixed model %s | %s on %d rows", formula, groups, int(result.nobs))
    return result


def tidy_mixed(result, conf_level: float = 0.95) -> pd.DataFrame:
    """Fixed effects plus variance components of a mixed model.

    Fixed-effect rows carry effect="fixed". The random-effect variances,
    their pairwise covariances (cov(a, b), present with a random slope) and
    the residual variance follow with effect="ran_pars" and NaN in the
    inference columns.
    """
    fixed = tidy(result, conf_level=conf_level)
    fixed = fixed[fixed["term"].isin(result.fe_params.index)].copy()
    fixed.insert(0, "effect", "fixed")

    cov_re = result.cov_re
    ran_rows = [
        {"effect": "ran_pars", "term": f"var({name})", "estimate": float(cov_re.loc[name, name])}
        for name in cov_re.index
    ]
    names = list(cov_re.index)
    for i, a in enumerate(names):
        for b in names[i + 1:]:
            ran_rows.append({
                "effect": "ran_pars",
                "term": f"cov({a}, {b})",
                "estimate": float(cov_re.loc[a, b]),
            })
    ran_rows.append({"effect": "ran_pars", "term": "var(residual)", "estimate": float(result.scale)})

    return pd.concat([fixed, pd.DataFrame(ran_rows)], ignore_index=True)


def seq_range(values, n: int = 50) -> np.ndarray:
    """n evenly spaced points spanning the range of values."""
    if n < 1:
        raise InvalidParameter(f"n must be >= 1, got {n}")
    arr = np.asarray(values, dtype=np.float64)
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        raise InvalidParameter("values must contain at least one non-missing number")
    return np.linspace(arr.min(), arr.max(), n)


def _grid_values(data: pd.DataFrame, column: str) -> list:
    """Distinct observed values of a column, categories kept in their order."""
    series = data[column].dropna()
    if isinstance(series.dtype, CategoricalDtype):
        observed = set(series.unique())
        return [c for c in series.cat.categories if c in observed]
    return sorted(series.unique())


def data_grid(data: pd.DataFrame, **values: Any) -> pd.DataFrame:
    """Cartesian grid of predictor values for visualising predictions.

    Each keyword names a column. A value of None takes that column's
    distinct values from data; anything else is used as given.

    Example:
        data_grid(df, x=seq_range(df["x"], 20), group=None)
    """
    if not values:
        raise InvalidParameter("data_grid needs at least one column")
    require_columns(data, [k for k, v in values.items() if v is None])

    levels = {}
    for column, given in values.items():
        if given is None:
            levels[column] = _grid_values(data, column)
        else:
            levels[column] = list(np.atleast_1d(given))

    index = pd.MultiIndex.from_product(list(levels.values()), names=list(levels.keys()))
    return index.to_frame(index=False)


def add_predictions(frame: pd.DataFrame, model, var: str = "pred") -> pd.DataFrame:
    """Return a copy of frame with model predictions in column var.

    model is anything with predict(frame): LinearModel, SmoothModel or a
    statsmodels results object (probabilities for a logistic fit).
    """
    out = frame.copy()
    out[var] = np.asarray(model.predict(frame), dtype=np.float64)
    return out


def add_residuals(
    frame: pd.DataFrame,
    model,
    response: str,
    var: str = "resid",
) -> pd.DataFrame:
    """Return a copy of frame with response - prediction in column var."""
    require_columns(frame, [response])
    out = frame.copy()
    pred = np.asarray(model.predict(frame), dtype=np.float64)
    out[var] = frame[response].to_numpy(dtype=np.float64) - pred
    return out


def compare_fits(fits: Mapping[str, Any]) -> pd.DataFrame:
    """Stack glance() rows for several named fits, sorted by AIC."""
    rows = []
    for name, result in fits.items():
        row = glance(result)
        row.insert(0, "model", name)
        rows.append(row)
    return pd.concat(rows, ignore_index=True).sort_values("aic").reset_index(drop=True)
