from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

import pandas as pd

from .models import GroupSummary, PricePoint


def _sanitize_values(values: Iterable[float | int | None]) -> List[float | None]:
    sanitized: List[float | None] = []
    for value in values:
        if value is None or pd.isna(value):
            sanitized.append(None)
        else:
            sanitized.append(float(value))
    return sanitized


def history_frame(points: Sequence[PricePoint]) -> pd.DataFrame:
    """Price points as a year/price frame, prices rounded to whole units."""
    return pd.DataFrame(
        [point.to_dict() for point in points],
        columns=["year", "price", "source"],
    )


def build_line_chart(
    df: pd.DataFrame,
    value_column: str,
    label_column: str = "year",
) -> Dict[str, List]:
    """
    Single-series payload in chronological order.
    """
    sorted_df = df.sort_values(label_column)
    labels = sorted_df[label_column].astype(str).tolist()
    values = _sanitize_values(sorted_df[value_column].tolist())
    return {"labels": labels, "values": values}


def build_multi_line_chart(
    frames: Mapping[str, pd.DataFrame],
    value_column: str,
    label_column: str = "year",
) -> Dict[str, Dict]:
    """
    Multi-series payload keyed by the mapping keys (e.g. property titles),
    aligned on the union of labels.
    """
    combined_labels = sorted(
        {
            label
            for df in frames.values()
            for label in df[label_column].astype(str).tolist()
        }
    )

    series_payload: Dict[str, List[float | None]] = {}
    for series_name, series_df in frames.items():
        indexed = series_df.set_index(series_df[label_column].astype(str))[value_column]
        series_payload[series_name] = _sanitize_values(
            indexed.get(label) if label in indexed.index else None for label in combined_labels
        )

    return {"labels": combined_labels, "series": series_payload}


def build_bar_chart(labels: List[str], values: List[float | int | None]) -> Dict[str, List]:
    return {"labels": labels, "values": _sanitize_values(values)}


def build_group_chart(groups: Sequence[GroupSummary], value_attr: str) -> Dict[str, List]:
    return build_bar_chart(
        [group.key for group in groups],
        [round(getattr(group, value_attr), 2) for group in groups],
    )
