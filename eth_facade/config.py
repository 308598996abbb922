"""Read JSON-RPC configuration from environment variables.

- ``JSON_RPC_URL`` for a single node

- ``JSON_RPC_<CHAIN NAME>``, like ``JSON_RPC_POLYGON``, when a chain id is given

- ``JSON_RPC_TIMEOUT`` for HTTP timeout in seconds
"""

import logging
import os

from eth_facade.exceptions import ConfigurationError
from eth_facade.provider.http import HTTPProvider
from eth_facade.utils import get_url_domain

logger = logging.getLogger(__name__)

#: Environment variable used when no chain id is given
DEFAULT_JSON_RPC_ENV = "JSON_RPC_URL"

#: Environment variable for HTTP timeout
JSON_RPC_TIMEOUT_ENV = "JSON_RPC_TIMEOUT"

#: Chain id -> name mapping used to form environment variable names
CHAIN_NAMES = {
    1: "Ethereum",
    10: "Optimism",
    56: "Binance",
    100: "Gnosis",
    137: "Polygon",
    146: "Sonic",
    324: "ZKsync",
    5000: "Mantle",
    8453: "Base",
    42161: "Arbitrum",
    43114: "Avalanche",
    11155111: "Sepolia",
}


def get_json_rpc_env(chain_id: int | None = None) -> str:
    """Get the JSON-RPC URL environment variable name.

    - Map chain id to a name and from there to environment variables.
    """
    if chain_id is None:
        return DEFAULT_JSON_RPC_ENV

    assert type(chain_id) is int, f"Chain ID must be an integer: {type(chain_id)}"
    chain_name = CHAIN_NAMES.get(chain_id)
    if not chain_name:
        raise ConfigurationError(f"CHAIN_NAMES not configured for chain id {chain_id}")
    return f"JSON_RPC_{chain_name.upper()}"


def read_json_rpc_url(chain_id: int | None = None) -> str:
    """Read JSON-RPC URL from environment variable.

    :raise ConfigurationError:
        If the environment variable is not set.
    """
    env_var = get_json_rpc_env(chain_id)
    json_rpc_url = os.environ.get(env_var)
    if not json_rpc_url:
        raise ConfigurationError(f"Environment variable {env_var} is not set")
    return json_rpc_url.strip()


def read_timeout(default: float = 30.0) -> float:
    value = os.environ.get(JSON_RPC_TIMEOUT_ENV)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{JSON_RPC_TIMEOUT_ENV} is not a number: {value!r}") from e


def create_provider_from_env(chain_id: int | None = None) -> HTTPProvider:
    """Create a HTTP provider from environment variables."""
    url = read_json_rpc_url(chain_id)
    provider = HTTPProvider(url, timeout=read_timeout())
    logger.info("Using JSON-RPC provider %s", get_url_domain(url))
    return provider
