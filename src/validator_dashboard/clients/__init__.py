from __future__ import annotations

from .etherscan import EtherscanClient
from .http import HttpJsonClient
from .json_rpc import JsonRpcClient, JsonRpcError

__all__ = ["EtherscanClient", "HttpJsonClient", "JsonRpcClient", "JsonRpcError"]
