from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))
sys.path.append(str(Path(__file__).resolve().parent))

from helpers import FakeSource, make_manifest


@pytest.fixture()
def manifest_payload() -> dict:
    return make_manifest()


@pytest.fixture()
def fake_source() -> FakeSource:
    return FakeSource()
