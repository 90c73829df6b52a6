from datetime import datetime

import pytest

from crumb.settings.json import json_settings


@pytest.fixture
def now():
    return datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture()
def restore_json_settings():
    """
    Restores the default JSON functions after a test configuring custom ones.
    """
    loads = json_settings._loads
    dumps = json_settings._dumps
    pretty_dumps = json_settings._pretty_dumps
    yield json_settings
    json_settings.use(loads, dumps, pretty_dumps)
