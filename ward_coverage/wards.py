"""Ward table ingestion: cleaning and cost/benefit derivation.

Turns a raw ward table (one row per ward, census counts and flood exposure
estimates) into :class:`~ward_coverage.models.WardRecord` objects ready for
the solvers. Rows whose numeric fields are missing or unparseable are
dropped here, so no NaN ever reaches the solvers.
"""

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import pandas as pd

from ward_coverage.exceptions import InvalidInputError
from ward_coverage.models import WardRecord

logger = logging.getLogger(__name__)

WARD_COLUMNS: dict[str, str] = {
    "ward_id": "ward",
    "district": "district",
    "child_count": "children",
    "plw_count": "plw",
    "affected_children": "affected_children",
    "affected_plw": "affected_plw",
}
"""Canonical field name to source column name."""

NUMERIC_FIELDS = ["child_count", "plw_count", "affected_children", "affected_plw"]

NA_SENTINELS = ("N/A", "NA", "n/a", "#N/A", "-", "")


@dataclass(frozen=True)
class RationScale:
    """Commodity required per beneficiary over the distribution period.

    Parameters
    ----------
    kg_per_child : float
        Kilograms per eligible child.
    kg_per_plw : float
        Kilograms per pregnant or lactating woman.
    """

    kg_per_child: float
    kg_per_plw: float

    def __post_init__(self) -> None:
        """Validate that both multipliers are non-negative."""
        if self.kg_per_child < 0 or self.kg_per_plw < 0:
            raise InvalidInputError("Ration multipliers must be non-negative.")


def ward_cost(child_count: float, plw_count: float, scale: RationScale) -> float:
    """Kilograms needed to serve a ward's eligible population."""
    return child_count * scale.kg_per_child + plw_count * scale.kg_per_plw


def ward_benefit(affected_children: float, affected_plw: float) -> float:
    """Directly flood-affected eligible beneficiaries in a ward."""
    return affected_children + affected_plw


def clean_ward_table(
    frame: pd.DataFrame,
    columns: Mapping[str, str] = WARD_COLUMNS,
    na_values: Iterable[str] = NA_SENTINELS,
) -> pd.DataFrame:
    """Normalize a raw ward table and drop incomplete rows.

    Parameters
    ----------
    frame : pd.DataFrame
        Raw table with the source columns named in ``columns``.
    columns : Mapping[str, str]
        Canonical field name to source column name.
    na_values : Iterable[str]
        Markers treated as missing in numeric columns.

    Returns
    -------
    pd.DataFrame
        New frame with canonical column names, numeric fields as floats, and
        only the rows where every numeric field is present and non-negative.

    Raises
    ------
    InvalidInputError
        If a required source column is absent.
    """
    missing = [source for source in columns.values() if source not in frame.columns]
    if missing:
        raise InvalidInputError(f"Ward table is missing columns: {missing}")

    cleaned = frame[list(columns.values())].rename(columns={v: k for k, v in columns.items()})
    cleaned["ward_id"] = cleaned["ward_id"].astype(str).str.strip()
    cleaned["district"] = cleaned["district"].astype(str).str.strip()

    sentinels = set(na_values)
    for field in NUMERIC_FIELDS:
        values = cleaned[field]
        if not pd.api.types.is_numeric_dtype(values):
            values = values.astype(str).str.strip().mask(lambda s: s.isin(sentinels))
        values = pd.to_numeric(values, errors="coerce")
        cleaned[field] = values.where(values >= 0)

    complete = cleaned.dropna(subset=NUMERIC_FIELDS).reset_index(drop=True)
    dropped = len(cleaned) - len(complete)
    if dropped:
        logger.warning("Dropped %d of %d wards with missing or invalid estimates", dropped, len(cleaned))
    duplicated = complete["ward_id"].duplicated()
    if duplicated.any():
        raise InvalidInputError(f"Duplicate ward ids: {sorted(complete.loc[duplicated, 'ward_id'].unique())}")
    return complete


def read_ward_table(
    path: str | os.PathLike,
    columns: Mapping[str, str] = WARD_COLUMNS,
    na_values: Iterable[str] = NA_SENTINELS,
    **read_kwargs,
) -> pd.DataFrame:
    """Read a delimited ward table and clean it with :func:`clean_ward_table`."""
    na_values = list(na_values)
    frame = pd.read_csv(path, na_values=na_values, **read_kwargs)
    logger.info("Read %d ward rows from %s", len(frame), path)
    return clean_ward_table(frame, columns, na_values)


def wards_from_frame(frame: pd.DataFrame, scale: RationScale) -> list[WardRecord]:
    """Derive ward records from a cleaned table, preserving row order.

    Parameters
    ----------
    frame : pd.DataFrame
        Output of :func:`clean_ward_table`.
    scale : RationScale
        Per-beneficiary commodity multipliers.

    Returns
    -------
    list[WardRecord]
    """
    return [
        WardRecord(
            ward_id=row.ward_id,
            district=row.district,
            cost=ward_cost(row.child_count, row.plw_count, scale),
            benefit=ward_benefit(row.affected_children, row.affected_plw),
        )
        for row in frame.itertuples(index=False)
    ]
