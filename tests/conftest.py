from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def england_filters() -> dict[str, str]:
    return {"areaType": "nation", "areaName": "England"}


@pytest.fixture
def cases_structure() -> dict[str, str]:
    return {"MyDate": "date", "newCases": "newCasesByPublishDate"}
