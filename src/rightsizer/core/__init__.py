from .exceptions import *
from .utils import *

__all__ = [
    "RightsizerException",
    "EmptyInputError",
    "InsufficientDataError",
    "InvalidRequestError",
    "ConfigurationException",
    "PricingException",
    "retry_with_backoff",
    "setup_logging",
    "parse_resource_string",
    "format_bytes",
    "format_cpu",
    "MIB",
    "GIB",
]
