"""Shared fixtures for the hare analysis tests."""

from __future__ import annotations

from pathlib import Path
import sys

import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


CSV_HEADER = "date,time,grid,trap,l_ear,r_ear,sex,age,weight,hindft,notes,b_key,session_id,study"

CSV_ROWS = [
    "11/26/98,,bonrip,1A,414D096A08,,m,j,1000,120,,917,51,Population",
    "11/26/98,,bonrip,2C,414D320671,,m,j,900,118,,936,51,Population",
    "11/26/98,,bonmat,1B,414D27785D,,f,j,800,115,,921,51,Population",
    "11/26/98,,bonmat,3A,414D1C1A10,,f,j,850,,,931,51,Population",
    "9/8/99,,bonbs,4B,415A0D1C2D,,f,j,,112,,860,52,Population",
    "9/8/99,,bonbs,5D,415A114528,,m,a,1500,135,,861,52,Population",
    "9/8/99,,bonrip,2B,415A0B0E63,,,j,700,110,,862,52,Population",
    "7/15/02,,bonrip,3D,414D0B1818,,f,j,1100,125,,870,53,Population",
    "7/15/02,,bonmat,1A,4153065F09,,m,J,1200,130,,871,53,Population",
    "bad date,,bonrip,1A,414D096A09,,m,j,950,121,,872,53,Population",
]


def write_csv(path: Path, rows=None, header: str = CSV_HEADER) -> Path:
    lines = [header] + list(CSV_ROWS if rows is None else rows)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def hares_csv(tmp_path: Path) -> Path:
    return write_csv(tmp_path / "bonanza_hares.csv")


@pytest.fixture
def weights_df() -> pd.DataFrame:
    return pd.DataFrame({
        'sex': ['m', 'm', 'f', 'f'],
        'weight': [1000.0, 900.0, 800.0, 850.0],
    })
