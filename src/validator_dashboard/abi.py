from __future__ import annotations

from eth_typing import URI
from web3 import Web3
from web3.contract import Contract

# Minimal ERC-20 surface used for balance reads (selector 0x70a08231).
ERC20_BALANCE_OF_ABI: list[dict] = [
    {
        "constant": True,
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
]


def erc20_contract(rpc_url: str, token_address: str, *, timeout: float = 10) -> Contract:
    """Build an ERC-20 contract handle bound to ``rpc_url``."""
    w3 = Web3(Web3.HTTPProvider(URI(rpc_url), request_kwargs={"timeout": timeout}))
    return w3.eth.contract(
        address=Web3.to_checksum_address(token_address),
        abi=ERC20_BALANCE_OF_ABI,
    )


def read_erc20_balance(
    rpc_url: str, token_address: str, owner: str, *, timeout: float = 10
) -> int:
    """Return ``balanceOf(owner)`` at the latest block via ``eth_call``."""
    contract = erc20_contract(rpc_url, token_address, timeout=timeout)
    balance = contract.functions.balanceOf(Web3.to_checksum_address(owner)).call(
        block_identifier="latest"
    )
    return int(balance)
