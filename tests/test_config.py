from __future__ import annotations

import pytest

from ll1_dashboard.config import DEFAULT_SERVICE_URL, Settings
from ll1_dashboard.errors import ConfigError


def test_defaults():
	s = Settings.from_env({})
	assert s.service_url == DEFAULT_SERVICE_URL == "http://localhost:3002/ll1"
	assert s.timeout == 5.0
	assert s.retries == 1
	assert s.declared_order is False
	assert s.log_level == "INFO"


def test_values_from_environment():
	s = Settings.from_env(
		{
			"LL1_SERVICE_URL": "https://ll1.example.org/ll1",
			"LL1_SERVICE_TIMEOUT": "0.5",
			"LL1_SERVICE_RETRIES": "0",
			"LL1_DECLARED_ORDER": "yes",
			"LL1_LOG_LEVEL": "debug",
		}
	)
	assert s == Settings("https://ll1.example.org/ll1", 0.5, 0, True, "DEBUG")


@pytest.mark.parametrize(
	"env",
	[
		{"LL1_SERVICE_URL": "localhost:3002"},
		{"LL1_SERVICE_TIMEOUT": "soon"},
		{"LL1_SERVICE_TIMEOUT": "-1"},
		{"LL1_SERVICE_RETRIES": "many"},
		{"LL1_SERVICE_RETRIES": "-2"},
		{"LL1_DECLARED_ORDER": "maybe"},
		{"LL1_LOG_LEVEL": "LOUD"},
	],
)
def test_invalid_values(env):
	with pytest.raises(ConfigError):
		Settings.from_env(env)
