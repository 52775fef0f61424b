# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - isolated_config (autouse) → fresh AppConfig, no .env / env leakage
# - root                      → temporary server root directory
# - template_text             → the debug/port example template
# - verbose                   → Diagnostics(verbose=True)
# ==============================================

import pytest

from sconfig import config as config_module
from sconfig.config import AppConfig
from sconfig.diagnostics import Diagnostics


TEMPLATE_TEXT = "debug: false\n#enable logs\nport: 8080"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Pin the config singleton so tests never read a real .env."""
    cfg = AppConfig(root_dir=str(tmp_path), debug=False, json_indent=2)
    monkeypatch.setattr(config_module, "_config_instance", cfg)
    return cfg


@pytest.fixture
def root(tmp_path):
    """Temporary server root directory."""
    return tmp_path


@pytest.fixture
def template_text():
    return TEMPLATE_TEXT


@pytest.fixture
def verbose():
    return Diagnostics(verbose=True)
