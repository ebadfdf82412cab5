from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ll1_dashboard.errors import ConfigError

DEFAULT_SERVICE_URL = "http://localhost:3002/ll1"
DEFAULT_TIMEOUT = 5.0
DEFAULT_RETRIES = 1

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

_configured = False


@dataclass(frozen=True)
class Settings:
	service_url: str = DEFAULT_SERVICE_URL
	timeout: float = DEFAULT_TIMEOUT
	retries: int = DEFAULT_RETRIES
	declared_order: bool = False
	log_level: str = "INFO"

	@classmethod
	def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
		"""
		Build settings from environment variables:

		  LL1_SERVICE_URL      analysis endpoint (POST)
		  LL1_SERVICE_TIMEOUT  seconds per attempt
		  LL1_SERVICE_RETRIES  extra attempts after a transport failure
		  LL1_DECLARED_ORDER   order table rows by declared non-terminal order
		  LL1_LOG_LEVEL        logging level name
		"""
		env = os.environ if env is None else env

		url = (env.get("LL1_SERVICE_URL") or DEFAULT_SERVICE_URL).strip()
		if not url.startswith(("http://", "https://")):
			raise ConfigError(f"LL1_SERVICE_URL must be an http(s) URL, got {url!r}")

		raw_timeout = env.get("LL1_SERVICE_TIMEOUT")
		try:
			timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
		except ValueError:
			raise ConfigError(f"LL1_SERVICE_TIMEOUT is not a number: {raw_timeout!r}") from None
		if timeout <= 0:
			raise ConfigError("LL1_SERVICE_TIMEOUT must be positive")

		raw_retries = env.get("LL1_SERVICE_RETRIES")
		try:
			retries = int(raw_retries) if raw_retries else DEFAULT_RETRIES
		except ValueError:
			raise ConfigError(f"LL1_SERVICE_RETRIES is not an integer: {raw_retries!r}") from None
		if retries < 0:
			raise ConfigError("LL1_SERVICE_RETRIES must be >= 0")

		raw_order = (env.get("LL1_DECLARED_ORDER") or "").strip().lower()
		if raw_order in _TRUE:
			declared_order = True
		elif raw_order in _FALSE:
			declared_order = False
		else:
			raise ConfigError(f"LL1_DECLARED_ORDER is not a boolean: {raw_order!r}")

		log_level = (env.get("LL1_LOG_LEVEL") or "INFO").strip().upper()
		if not isinstance(logging.getLevelName(log_level), int):
			raise ConfigError(f"Unknown LL1_LOG_LEVEL: {log_level!r}")

		return cls(
			service_url=url,
			timeout=timeout,
			retries=retries,
			declared_order=declared_order,
			log_level=log_level,
		)


def configure_logging(level: str = "INFO") -> None:
	global _configured
	if _configured:
		logging.getLogger().setLevel(level)
		return
	logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
	_configured = True
