"""
Shared fixtures: a small raw dataset in the CSV column layout.

Hand-computed expectations for the sample rows (default config):

    id  price      carpet  ppa    roi     yield  composite  price risk
    1   12,000,000 1000    12000  10.75   3.75   6.725      Medium
    2    8,000,000 1000     8000  12.625  5.625  7.8375     Low
    3   30,000,000 1500    20000  8.5     1.5    4.55       High
    4   50,000,000 2000    25000  8.56    1.56   4.692      High
    5   NA          800    -      0       0      -          (excluded)
    6    5,000,000  900    5556   11.86   4.86   6.802      Low
"""
from typing import Dict, List

import pandas as pd
import pytest

from analytics.config import DEFAULT_CONFIG
from analytics.normalizer import normalize_record
from analytics.record_store import RecordStore, set_store
from tests.helpers import make_row

SAMPLE_ROWS: List[Dict[str, str]] = [
    make_row(
        **{
            "ID": "1",
            "Property": "Skyline Residency",
            "Project Name": "Skyline",
            "Developer": "Acme Builders",
            "Type of Property": "Residential Apartment",
            "City": "Pune",
            "Area Name": "Downtown Baner",
            "Price": "1,20,00,000",
            "Carpet Area": "1000",
            "bedroom": "3",
            "Possession Status": "Ready to Move",
            "Lift": "Y",
            "Gymnasium": "1",
            "Swimming Pool": "Y",
            "latitude": "18.56",
            "longitude": "73.78",
        }
    ),
    make_row(
        **{
            "ID": "2",
            "Property": "Baner Heights",
            "Project Name": "Heights",
            "Developer": "Acme Builders",
            "Type of Property": "Residential Apartment",
            "City": "Pune",
            "Area Name": "Downtown Baner",
            "Price": "8000000",
            "Carpet Area": "1000",
            "bedroom": "2",
            "Possession Status": "Under Construction",
            "Lift": "1",
            "latitude": "18.57",
            "longitude": "73.79",
        }
    ),
    make_row(
        **{
            "ID": "3",
            "Property": "Golf View Villa",
            "Project Name": "Greens",
            "Developer": "Acme Builders",
            "Type of Property": "Independent Villa",
            "City": "Pune",
            "Area Name": "Kothrud",
            "Price": "30000000",
            "Carpet Area": "1500",
            "bedroom": "4",
            "Possession Status": "Under Construction",
        }
    ),
    make_row(
        **{
            "ID": "4",
            "Property": "Bandra Towers",
            "Project Name": "Towers",
            "Developer": "Zenith Developers",
            "Type of Property": "Residential Apartment",
            "City": "Mumbai",
            "Area Name": "Prime Bandra",
            "Price": "50000000",
            "Carpet Area": "2000",
            "bedroom": "3",
            "Possession Status": "Ready to Move",
            "latitude": "19.06",
            "longitude": "72.83",
        }
    ),
    make_row(
        **{
            "ID": "5",
            "Property": "Bandra Office Space",
            "Developer": "Zenith Developers",
            "Type of Property": "Commercial Office",
            "City": "Mumbai",
            "Area Name": "Prime Bandra",
            "Price": "NA",
            "Carpet Area": "800",
        }
    ),
    make_row(
        **{
            "ID": "6",
            "Property": "Hinjewadi Nest",
            "Project Name": "Nest",
            "Developer": "Orbit Homes",
            "Type of Property": "Residential Apartment",
            "City": "Pune",
            "Area Name": "Hinjewadi Suburb",
            "Price": "5000000",
            "Carpet Area": "900",
            "bedroom": "2",
            "Possession Status": "Ready to Move",
        }
    ),
]


@pytest.fixture
def sample_rows() -> List[Dict[str, str]]:
    return [dict(row) for row in SAMPLE_ROWS]


@pytest.fixture
def sample_records(sample_rows):
    return [normalize_record(row) for row in sample_rows]


@pytest.fixture
def write_csv(tmp_path):
    def _write(rows, name="properties.csv"):
        path = tmp_path / name
        pd.DataFrame(rows).to_csv(path, index=False)
        return path

    return _write


@pytest.fixture
def csv_path(write_csv, sample_rows):
    return write_csv(sample_rows)


@pytest.fixture
def store(csv_path):
    record_store = RecordStore(csv_path, config=DEFAULT_CONFIG, retries=0, retry_delay=0)
    set_store(record_store)
    yield record_store
    set_store(None)
