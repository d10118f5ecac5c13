"""Utility functions and decorators."""

import logging.config
import structlog
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, Union
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

MIB = 1024 ** 2
GIB = 1024 ** 3

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_MEMORY_UNITS = [
    ('Ki', 1024),
    ('Mi', 1024 ** 2),
    ('Gi', 1024 ** 3),
    ('Ti', 1024 ** 4),
    ('Pi', 1024 ** 5),
    ('k', 1000),
    ('K', 1000),
    ('M', 1000 ** 2),
    ('G', 1000 ** 3),
    ('T', 1000 ** 4),
    ('P', 1000 ** 5),
]


def _log_retry(state: RetryCallState) -> None:
    error = state.outcome.exception() if state.outcome else None
    structlog.get_logger(__name__).warning(
        "Retrying after failure",
        call=getattr(state.fn, "__qualname__", str(state.fn)),
        attempt=state.attempt_number,
        error=str(error)
    )


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 1.5,
    max_wait: float = 60.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
):
    """Decorator that retries ``retry_on`` errors with exponential backoff.

    The last error is re-raised once ``max_retries`` attempts are spent.
    """
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=backoff_factor, max=max_wait),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        reraise=True
    )


def _load_logging_config(config_path: Optional[Union[str, Path]]) -> Optional[Dict[str, Any]]:
    if not config_path or not Path(config_path).exists():
        return None
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    return config if isinstance(config, dict) else None


def _structlog_processors(json_logs: bool) -> List[Any]:
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def setup_logging(
    config_path: Optional[Union[str, Path]] = None,
    log_level: str = "INFO",
    json_logs: bool = False
) -> None:
    """Configure stdlib logging and structlog for the CLI.

    A YAML dictConfig at ``config_path`` wins over ``log_level``. Rendering is
    JSON when ``json_logs`` is set, otherwise the structlog console renderer.
    """
    config = _load_logging_config(config_path)
    if config is not None:
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=getattr(logging, log_level.upper(), logging.INFO),
            format=LOG_FORMAT,
            force=True
        )

    structlog.configure(
        processors=_structlog_processors(json_logs),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_resource_string(resource: Any, resource_type: str = "memory") -> int:
    """Parse a Kubernetes quantity ('500m', '2', '512Mi', '1G') to millicores or bytes.

    Bare numbers follow Kubernetes semantics: cores for CPU, bytes for memory.
    """
    if resource is None:
        return 0
    if isinstance(resource, (int, float)):
        resource_str = repr(resource)
    else:
        resource_str = str(resource).strip()
    if not resource_str:
        return 0

    if resource_type.lower() == "cpu":
        if resource_str.endswith('m'):
            return int(float(resource_str[:-1]))
        return int(round(float(resource_str) * 1000))

    if resource_type.lower() == "memory":
        for unit, multiplier in _MEMORY_UNITS:
            if resource_str.endswith(unit):
                return int(float(resource_str[:-len(unit)]) * multiplier)
        return int(float(resource_str))

    raise ValueError(f"Unsupported resource type: {resource_type}")


def format_bytes(bytes_value: float, unit: str = "auto") -> str:
    """Format bytes to human readable format."""
    if unit == "auto":
        for unit in ['B', 'KiB', 'MiB', 'GiB', 'TiB']:
            if abs(bytes_value) < 1024.0:
                return f"{bytes_value:.2f} {unit}"
            bytes_value /= 1024.0
        return f"{bytes_value:.2f} PiB"

    units = {'B': 1, 'KIB': 1024, 'MIB': MIB, 'GIB': GIB, 'TIB': 1024 ** 4}
    if unit.upper() in units:
        return f"{bytes_value / units[unit.upper()]:.2f} {unit}"

    return str(bytes_value)


def format_cpu(millicores: float) -> str:
    """Format millicores to human readable format."""
    if millicores >= 1000:
        return f"{millicores / 1000:.2f} cores"
    return f"{millicores:.0f}m"
