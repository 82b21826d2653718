from __future__ import annotations

import pytest

from fakes import FakeImpersonator, FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def impersonator() -> FakeImpersonator:
    return FakeImpersonator()
