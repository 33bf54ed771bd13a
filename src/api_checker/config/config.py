import os
from typing import Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from api_checker.contracts.probe_run import ProbeKind
from api_checker.core.errors import ConfigError

DEFAULT_PROBES = ",".join(kind.value for kind in ProbeKind)
MAINNET_GENESIS_TIME = 1606824023


class Config:
    """
    Configuration class for environment variables and default settings.
    """

    # Comma separated beacon node base URLs, e.g. "http://lighthouse:5052,http://prysm:3500"
    BEACON_API_ENDPOINTS = os.environ.get("BEACON_API_ENDPOINTS", "")
    RUN_EVERY_SECONDS = float(os.environ.get("RUN_EVERY_SECONDS", "60"))
    REQUEST_TIMEOUT_SECONDS = float(os.environ.get("REQUEST_TIMEOUT_SECONDS", "10"))
    PROBES = os.environ.get("PROBES", DEFAULT_PROBES)

    # Chain clock used to keep sampled slots inside the nodes' pruning window
    GENESIS_TIME = int(os.environ.get("GENESIS_TIME", str(MAINNET_GENESIS_TIME)))
    SECONDS_PER_SLOT = int(os.environ.get("SECONDS_PER_SLOT", "12"))
    RECENT_SLOT_WINDOW = int(os.environ.get("RECENT_SLOT_WINDOW", "64"))

    # 0 disables benching of persistently failing endpoints
    ENDPOINT_FAILURE_THRESHOLD = int(os.environ.get("ENDPOINT_FAILURE_THRESHOLD", "0"))
    ENDPOINT_COOLDOWN_RUNS = int(os.environ.get("ENDPOINT_COOLDOWN_RUNS", "5"))

    METRICS_NAMESPACE = os.environ.get("METRICS_NAMESPACE", "api_checker")
    METRICS_HOST = os.environ.get("METRICS_HOST", "127.0.0.1")
    METRICS_PORT = int(os.environ.get("METRICS_PORT", "8080"))


class PipelineConfig(BaseModel):
    """
    Immutable runtime settings for the probe pipeline, built once at startup.
    """

    model_config = ConfigDict(frozen=True)

    endpoints: Tuple[str, ...]
    run_every_seconds: float = 60.0
    request_timeout_seconds: float = 10.0
    probes: Tuple[ProbeKind, ...] = tuple(ProbeKind)
    genesis_time: int = MAINNET_GENESIS_TIME
    seconds_per_slot: int = 12
    recent_slot_window: int = 64
    endpoint_failure_threshold: int = 0
    endpoint_cooldown_runs: int = 5

    @field_validator("endpoints")
    @classmethod
    def _check_endpoints(cls, value):
        if not value:
            raise ValueError("at least one beacon API endpoint is required")
        normalized = []
        for url in value:
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"invalid beacon API endpoint URL: {url!r}")
            normalized.append(url.rstrip("/"))
        if len(set(normalized)) != len(normalized):
            raise ValueError("beacon API endpoints must be unique")
        return tuple(normalized)

    @field_validator("probes")
    @classmethod
    def _check_probes(cls, value):
        if not value:
            raise ValueError("at least one probe kind is required")
        return value

    @field_validator("run_every_seconds", "request_timeout_seconds")
    @classmethod
    def _check_positive(cls, value):
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("seconds_per_slot", "recent_slot_window")
    @classmethod
    def _check_positive_int(cls, value):
        if value <= 0:
            raise ValueError("must be positive")
        return value


def _split_csv(raw: str):
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def load_pipeline_config(config=Config) -> PipelineConfig:
    """
    Build a validated PipelineConfig from a Config-like object.

    Raises:
        ConfigError: If any setting is missing or invalid.
    """
    try:
        return PipelineConfig(
            endpoints=_split_csv(config.BEACON_API_ENDPOINTS),
            run_every_seconds=config.RUN_EVERY_SECONDS,
            request_timeout_seconds=config.REQUEST_TIMEOUT_SECONDS,
            probes=_split_csv(config.PROBES),
            genesis_time=config.GENESIS_TIME,
            seconds_per_slot=config.SECONDS_PER_SLOT,
            recent_slot_window=config.RECENT_SLOT_WINDOW,
            endpoint_failure_threshold=config.ENDPOINT_FAILURE_THRESHOLD,
            endpoint_cooldown_runs=config.ENDPOINT_COOLDOWN_RUNS,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
