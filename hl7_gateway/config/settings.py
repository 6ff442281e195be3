"""
Gateway settings loaded from the process environment.

Values are read once at startup into an immutable settings object which is
then handed to the service container. Request handlers never consult the
environment directly.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_EMR_ENDPOINT = "http://localhost:3010"
DEFAULT_FHIR_BASE_URL = "http://localhost:3010/fhir"
DEFAULT_CONVERSION_TIMEOUT_SECONDS = 30.0


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_optional_float(name: str, value: Optional[str]) -> Optional[float]:
    """Parse a positive float, treating unset, empty and ``none`` as no value."""
    if value is None or value.strip().lower() in ("", "none", "null"):
        return None
    try:
        parsed = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {value!r}")
    if parsed <= 0:
        raise ValueError(f"{name} must be a positive number of seconds")
    return parsed


def _parse_origins(value: Optional[str]) -> List[str]:
    origins = [o.strip() for o in (value or "*").split(",") if o.strip()]
    return origins or ["*"]


@dataclass(frozen=True)
class GatewaySettings:
    """
    Runtime configuration for the gateway.

    Attributes:
        emr_endpoint: Base address of the upstream HL7 conversion service
        fhir_base_url: Base address for FHIR read/search requests
        conversion_timeout_seconds: Upper bound on the conversion call
        fhir_timeout_seconds: Upper bound on FHIR reads (None = no timeout)
        host: Bind address for uvicorn
        port: Bind port for uvicorn
        cors_origins: Origins allowed by the CORS middleware
        log_level: Root logging level name
        debug: Enables uvicorn reload
    """

    emr_endpoint: str = DEFAULT_EMR_ENDPOINT
    fhir_base_url: str = DEFAULT_FHIR_BASE_URL
    conversion_timeout_seconds: Optional[float] = DEFAULT_CONVERSION_TIMEOUT_SECONDS
    fhir_timeout_seconds: Optional[float] = None
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    debug: bool = False

    def __post_init__(self) -> None:
        # Upstream paths are joined with "/", so stored bases never end in one.
        object.__setattr__(self, "emr_endpoint", self.emr_endpoint.rstrip("/"))
        object.__setattr__(self, "fhir_base_url", self.fhir_base_url.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GatewaySettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Populated settings instance

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ

        port_raw = env.get("PORT", "3000")
        try:
            port = int(port_raw)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {port_raw!r}")

        conversion_timeout = _parse_optional_float(
            "CONVERSION_TIMEOUT_SECONDS",
            env.get("CONVERSION_TIMEOUT_SECONDS", str(DEFAULT_CONVERSION_TIMEOUT_SECONDS)),
        )

        settings = cls(
            emr_endpoint=env.get("EMR_ENDPOINT") or DEFAULT_EMR_ENDPOINT,
            fhir_base_url=env.get("FHIR_BASE_URL") or DEFAULT_FHIR_BASE_URL,
            conversion_timeout_seconds=conversion_timeout,
            fhir_timeout_seconds=_parse_optional_float(
                "FHIR_TIMEOUT_SECONDS", env.get("FHIR_TIMEOUT_SECONDS")
            ),
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            cors_origins=_parse_origins(env.get("CORS_ORIGINS")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            debug=_parse_bool(env.get("DEBUG")),
        )
        logger.debug(
            "Loaded gateway settings: emr_endpoint=%s fhir_base_url=%s",
            settings.emr_endpoint,
            settings.fhir_base_url,
        )
        return settings
