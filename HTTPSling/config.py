""" Client configuration loaded from JSON with environment overrides """

import os, json
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from .client import SlingClient
from .models import HeaderMap

ADDRESS_ENV_VAR = "SLING_ADDRESS"
READ_TIMEOUT_ENV_VAR = "SLING_READ_TIMEOUT"


@dataclass
class ClientConfig:
    """Settings a SlingClient is built from."""
    address: str
    read_timeout: float = 0.0
    user_agent: Optional[str] = None

    def __post_init__(self):
        """Validate the address and timeout."""
        if not self.address:
            raise ValueError(f"Address cannot be empty. Set it in the config file or the {ADDRESS_ENV_VAR} environment variable.")
        if self.read_timeout is None:
            self.read_timeout = 0.0
        if self.read_timeout < 0:
            raise ValueError(f"Read timeout cannot be negative, got {self.read_timeout}")


def _read_config_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f: raw_config = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Client configuration file not found at {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in client configuration file: {e}")

    if not isinstance(raw_config, dict):
        raise ValueError(f"Client configuration in {path} must be a JSON object")

    known = {f.name for f in fields(ClientConfig)}
    return {key: value for key, value in raw_config.items() if key in known}


def load_client_config(path: Optional[str] = None) -> ClientConfig:
    """Load client settings from an optional JSON file, then apply environment overrides."""
    raw_config = _read_config_file(path) if path else {}

    address = os.getenv(ADDRESS_ENV_VAR)
    if address:
        raw_config['address'] = address

    read_timeout = os.getenv(READ_TIMEOUT_ENV_VAR)
    if read_timeout:
        try:
            raw_config['read_timeout'] = float(read_timeout)
        except ValueError:
            raise ValueError(f"{READ_TIMEOUT_ENV_VAR} must be a number of seconds, got {read_timeout!r}")

    return ClientConfig(
        address=raw_config.get('address', ''),
        read_timeout=raw_config.get('read_timeout', 0.0),
        user_agent=raw_config.get('user_agent')
    )


def create_client(config: Optional[ClientConfig] = None, **overrides) -> SlingClient:
    """Create a SlingClient from config (loaded from the environment when omitted)."""
    config = config or load_client_config()

    address = overrides.pop('address', None) or config.address
    read_timeout = overrides.pop('read_timeout', None)
    if read_timeout is None:
        read_timeout = config.read_timeout

    default_headers = HeaderMap(overrides.pop('default_headers', None))
    if config.user_agent and 'User-Agent' not in default_headers:
        default_headers.add('User-Agent', config.user_agent)

    if overrides:
        raise TypeError(f"Unknown client options: {', '.join(sorted(overrides))}")

    return SlingClient(address=address, read_timeout=read_timeout, default_headers=default_headers)
