"""Shared fixtures for ward coverage tests."""

import pytest

from ward_coverage.models import WardRecord


@pytest.fixture()
def sample_items():
    """Three items whose optimum at capacity 30 is the single most valuable one."""
    return [(10, 5), (20, 15), (30, 25)]


@pytest.fixture()
def sample_wards():
    """Standard set of wards across three districts."""
    return [
        WardRecord(ward_id="W01", district="Chikwawa", cost=12_000, benefit=850),
        WardRecord(ward_id="W02", district="Chikwawa", cost=30_000, benefit=2_100),
        WardRecord(ward_id="W03", district="Nsanje", cost=18_000, benefit=1_600),
        WardRecord(ward_id="W04", district="Nsanje", cost=7_000, benefit=300),
        WardRecord(ward_id="W05", district="Nsanje", cost=25_000, benefit=1_900),
        WardRecord(ward_id="W06", district="Phalombe", cost=15_000, benefit=1_200),
        WardRecord(ward_id="W07", district="Phalombe", cost=9_000, benefit=700),
        WardRecord(ward_id="W08", district="Phalombe", cost=40_000, benefit=2_500),
    ]


@pytest.fixture()
def sample_event(sample_wards):
    """Orchestrator-shaped event with field mapping applied."""
    wards = [
        {
            "ward_id": w.ward_id,
            "district": w.district,
            "cost_kg": w.cost,
            "affected_beneficiaries": w.benefit,
        }
        for w in sample_wards
    ]
    return {"wards": wards, "capacities": [0, 40_000, 80_000, 120_000, 160_000]}
