import numpy as np
import pandas as pd
import pytest

from hospital_analysis.core.loader import load_frame


BASE_ROW = {
    "age": 40,
    "gender": "Male",
    "condition": "Diabetes",
    "procedure": "Insulin Therapy",
    "cost": 1000,
    "length_of_stay": 5,
    "readmission": "No",
    "outcome": "Recovered",
    "satisfaction": 4,
}

CSV_HEADER = (
    "Patient_ID,Age,Gender,Condition,Procedure,Cost,"
    "Length_of_Stay,Readmission,Outcome,Satisfaction\n"
)


@pytest.fixture
def make_patients():
    """
    Build a validated patient frame from partial rows.

    Missing fields come from BASE_ROW; patient_id defaults to the
    1-based position.
    """
    def _make(rows):
        full = [
            {"patient_id": i, **BASE_ROW, **row}
            for i, row in enumerate(rows, start=1)
        ]
        if not full:
            full_df = pd.DataFrame(columns=["patient_id", *BASE_ROW])
        else:
            full_df = pd.DataFrame(full)
        return load_frame(full_df).frame

    return _make


@pytest.fixture
def hospital_df(make_patients):
    """
    Deterministic synthetic hospital of 600 patients.
    """
    rng = np.random.default_rng(7)
    n = 600

    conditions = ["Diabetes", "Heart Disease", "Cancer", "Stroke", "Fractured Arm"]
    procedures = ["Insulin Therapy", "Angioplasty", "Chemotherapy", "CT Scan", "X-Ray and Splint"]

    rows = []
    for _ in range(n):
        c = int(rng.integers(len(conditions)))
        rows.append({
            "age": int(rng.integers(18, 95)),
            "gender": "Male" if rng.random() < 0.5 else "Female",
            "condition": conditions[c],
            "procedure": procedures[c] if rng.random() < 0.8 else procedures[int(rng.integers(len(procedures)))],
            "cost": round(float(rng.uniform(500, 25000)), 2),
            "length_of_stay": int(rng.integers(1, 15)),
            "readmission": "Yes" if rng.random() < 0.3 else "No",
            "outcome": "Recovered" if rng.random() < 0.7 else "Stable",
            "satisfaction": int(rng.integers(1, 6)),
        })

    return make_patients(rows)


@pytest.fixture
def sample_csv(tmp_path):
    """
    Small CSV in the original table layout, with four bad rows.
    """
    path = tmp_path / "patients.csv"
    path.write_text(
        CSV_HEADER
        + "1,25,Male,Diabetes,Insulin Therapy,100.00,2,No,Recovered,5\n"
        + "2,45,Female,Heart Disease,Angioplasty,200.00,5,Yes,Stable,3\n"
        + "3,75,Male,Stroke,CT Scan,300.00,9,Yes,Recovered,2\n"
        + "4,abc,Male,Stroke,CT Scan,300.00,9,Yes,Recovered,2\n"
        + "5,50,Female,Stroke,CT Scan,300.00,9,Yes,Recovered,7\n"
        + "2,33,Female,Cancer,Chemotherapy,900.00,4,No,Stable,4\n"
        + "6,60,,Cancer,Chemotherapy,900.00,4,No,Stable,4\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def hospital_csv(hospital_df, tmp_path):
    path = tmp_path / "hospital.csv"
    hospital_df.to_csv(path, index=False)
    return path
