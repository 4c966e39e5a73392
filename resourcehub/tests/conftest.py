from __future__ import annotations

import pytest

from resourcehub.analytics.events import clear_events
from resourcehub.resources.cache import clear_cache
from resourcehub.resources.store import reset_store


@pytest.fixture(autouse=True)
def fresh_state():
    reset_store()
    clear_cache()
    clear_events()
    yield
