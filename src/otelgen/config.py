"""
Configuration for the synthetic telemetry generator.

Resource attributes and resource.schemaUrl are loaded from config/resource.yaml
under the resources root. When running from source, resource/ at project root is
used. When the package is installed, set OTELGEN_ROOT to a directory containing
config/ (e.g. the project's resource/ folder); without it the built-in defaults
below apply.
"""

import os
from pathlib import Path
from typing import Any

import yaml

# Instrumentation scopes used by the three emitters.
TRACER_NAME = "opentelemetry-trace-api-demo"
LOGGER_NAME = "opentelemetry-logs-api-demo"
METER_NAME = "opentelemetry-metrics-api-demo"
SCOPE_VERSION = "1.0.0"
SCOPE_SCHEMA_URL = "https://opentelemetry.io/schemas/1.0.0"

DEFAULT_SERVICE_NAME = "otelgen"
DEFAULT_ENDPOINT = "http://localhost:4318"

_DEFAULT_SCHEMA_URL = "https://opentelemetry.io/schemas/1.0.0"
_DEFAULT_RESOURCE_ATTRIBUTES = {
    "service.version": "1.0.0",
    "environment": "staging",
}


def get_resources_root() -> Path:
    """Return the root directory for config resources.

    Resolution order:
    1. OTELGEN_ROOT env var (must contain config/)
    2. resource/ under directory containing pyproject.toml (when running from source)
    3. otelgen/resources/ next to this package (when installed)
    """
    env_root = os.environ.get("OTELGEN_ROOT")
    if env_root:
        p = Path(env_root).resolve()
        if p.is_dir():
            return p
    here = Path(__file__).resolve().parent
    for candidate in [here, *here.parents]:
        if (candidate / "pyproject.toml").is_file():
            return candidate / "resource"
    return Path(__file__).resolve().parent / "resources"


def resource_config_path() -> Path:
    """Path of config/resource.yaml under the current resources root."""
    return get_resources_root() / "config" / "resource.yaml"


def load_yaml(path: Path, default: Any = None) -> Any:
    """Load YAML file; return default on missing file or parse error."""
    if default is None:
        default = {}
    if not path.exists():
        return default
    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return default
    return data if isinstance(data, dict) else default


def _load_resource_config(path: Path | None = None) -> tuple[str, dict[str, str]]:
    """Load resource config. Returns (schema_url, attributes)."""
    data = load_yaml(path or resource_config_path())
    schema_url = data.get("schema_url")
    if not isinstance(schema_url, str) or not schema_url.strip():
        schema_url = _DEFAULT_SCHEMA_URL
    raw = data.get("attributes")
    if not isinstance(raw, dict):
        return schema_url.strip(), dict(_DEFAULT_RESOURCE_ATTRIBUTES)
    # Resource attribute values must be primitives; YAML may hand back ints for versions.
    attrs = {str(k): str(v) for k, v in raw.items() if isinstance(v, (str, int, float, bool))}
    return schema_url.strip(), attrs


def resource_schema_url(path: Path | None = None) -> str:
    """Schema URL for the OTEL resource (resource.schemaUrl)."""
    schema_url, _ = _load_resource_config(path)
    return schema_url


def resource_attributes(service_name: str, path: Path | None = None) -> dict[str, str]:
    """Build resource attributes: values from resource.yaml plus service.name."""
    _, attrs = _load_resource_config(path)
    attrs["service.name"] = service_name
    return attrs
