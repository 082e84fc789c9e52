"""Public endpoints, validator addresses and token metadata per network."""

from typing import TypedDict


class CosmosChain(TypedDict):
    lcd: str
    rpc: str
    chain_id: str
    decimals: int


COSMOS_CHAINS: dict[str, CosmosChain] = {
    "cosmos": {
        "lcd": "https://cosmoshub.api.kjnodes.com",
        "rpc": "https://cosmoshub-rpc.publicnode.com",
        "chain_id": "cosmoshub-4",
        "decimals": 6,
    },
    "osmosis": {
        "lcd": "https://lcd.osmosis.zone",
        "rpc": "https://rpc.osmosis.zone",
        "chain_id": "osmosis-1",
        "decimals": 6,
    },
    "celestia": {
        "lcd": "https://celestia-rest.publicnode.com",
        "rpc": "https://celestia-rpc.publicnode.com",
        "chain_id": "celestia",
        "decimals": 6,
    },
    "babylon": {
        "lcd": "https://babylon-api.polkachu.com",
        "rpc": "https://babylon-rpc.polkachu.com",
        "chain_id": "bbn-1",
        "decimals": 6,
    },
    "terra": {
        "lcd": "https://terra-api.polkachu.com",
        "rpc": "https://terra-rpc.polkachu.com",
        "chain_id": "phoenix-1",
        "decimals": 6,
    },
    "union": {
        "lcd": "https://union-api.polkachu.com",
        "rpc": "https://union-rpc.polkachu.com",
        "chain_id": "union-1",
        "decimals": 18,
    },
    "neutron": {
        "lcd": "https://rest-lb.neutron.org",
        "rpc": "https://rpc-lb.neutron.org",
        "chain_id": "neutron-1",
        "decimals": 6,
    },
    "xpla": {
        "lcd": "https://dimension-lcd.xpla.dev",
        "rpc": "https://dimension-rpc.xpla.dev",
        "chain_id": "dimension_37-1",
        "decimals": 18,
    },
    "agoric": {
        "lcd": "https://main.api.agoric.net",
        "rpc": "https://main.rpc.agoric.net",
        "chain_id": "agoric-3",
        "decimals": 6,
    },
    "zetachain": {
        "lcd": "https://zetachain-api.polkachu.com",
        "rpc": "https://zetachain-rpc.polkachu.com",
        "chain_id": "zetachain_7000-1",
        "decimals": 18,
    },
    "dymension": {
        "lcd": "https://dymension-rest.publicnode.com",
        "rpc": "https://dymension-rpc.publicnode.com",
        "chain_id": "dymension_1100-1",
        "decimals": 18,
    },
    "nolus": {
        "lcd": "https://nolus-api.polkachu.com",
        "rpc": "https://nolus-rpc.polkachu.com",
        "chain_id": "pirin-1",
        "decimals": 6,
    },
    "seda": {
        "lcd": "https://seda-api.polkachu.com",
        "rpc": "https://seda-rpc.polkachu.com",
        "chain_id": "seda-1",
        "decimals": 18,
    },
    "persistence": {
        "lcd": "https://rest.core.persistence.one",
        "rpc": "https://rpc.core.persistence.one",
        "chain_id": "core-1",
        "decimals": 6,
    },
    "lava": {
        "lcd": "https://lava-api.polkachu.com",
        "rpc": "https://lava-rpc.polkachu.com",
        "chain_id": "lava-mainnet-1",
        "decimals": 6,
    },
    "nibiru": {
        "lcd": "https://nibiru-api.polkachu.com",
        "rpc": "https://nibiru-rpc.polkachu.com",
        "chain_id": "cataclysm-1",
        "decimals": 6,
    },
    "quicksilver": {
        "lcd": "https://quicksilver-api.polkachu.com",
        "rpc": "https://quicksilver-rpc.polkachu.com",
        "chain_id": "quicksilver-2",
        "decimals": 6,
    },
    "sentinel": {
        "lcd": "https://sentinel-api.polkachu.com",
        "rpc": "https://sentinel-rpc.polkachu.com",
        "chain_id": "sentinelhub-2",
        "decimals": 6,
    },
    "haqq": {
        "lcd": "https://haqq-api.polkachu.com",
        "rpc": "https://haqq-rpc.polkachu.com",
        "chain_id": "haqq_11235-1",
        "decimals": 18,
    },
}

SOLANA_RPC_URLS = [
    "https://api.mainnet-beta.solana.com",
    "https://solana-mainnet.g.alchemy.com/v2/demo",
    "https://rpc.ankr.com/solana",
]
SUI_RPC_URLS = [
    "https://fullnode.mainnet.sui.io:443",
    "https://sui-mainnet.nodeinfra.com",
]
NEAR_RPC_URLS = [
    "https://rpc.mainnet.near.org",
    "https://near.lava.build",
]
ETH_RPC_URLS = [
    "https://eth.llamarpc.com",
    "https://ethereum.publicnode.com",
    "https://rpc.ankr.com/eth",
    "https://cloudflare-eth.com",
]

SOLANA_DECIMALS = 9  # lamports
SUI_DECIMALS = 9  # MIST
NEAR_DECIMALS = 24  # yoctoNEAR
SKALE_DECIMALS = 18
LINK_DECIMALS = 18

VALIDATOR_ADDRESSES: dict[str, str] = {
    "cosmos": "cosmosvaloper17mggn4znyeyg25wd7498qxl7r2jhgue8u4qjcq",
    "osmosis": "osmovaloper17mggn4znyeyg25wd7498qxl7r2jhgue8td054x",
    "celestia": "celestiavaloper1murrqgqahxevedty0nzqrn5hj434fvffxufxcl",
    "babylon": "bbnvaloper1fyfnvvswqjmg2xlpx2grldmlnuzqj6zj2hc8hd",
    "terra": "terravaloper1wdymftapg5pcvf2aqw4pd0yuuh5w9m6yqdnukv",
    "union": "unionvaloper1dqsjs63kpahlkfj3x5f9kuryk78uekqdv9z72k",
    "neutron": "neutronvaloper1rlyy2ltkc9t9s8gp2tmqxk6guggf6h9g6xj26y",
    "xpla": "xplavaloper1a00g26m9ut98xspcmlz0fmtknfeqmmne3jdr99",
    "agoric": "agoricvaloper148xd583ya4pjs3g7wj2h2eatsy294azk452k6v",
    "zetachain": "zetavaloper1svnup50643mzhcda98fm20r2cvafpllcnuaefx",
    "dymension": "dymvaloper1ycsjsqqucdyvl2560y7y2yhfjaj0vvta4v7hm3",
    "nolus": "nolusvaloper1vph2mzpcx8a366strk30cg60nznrwy762eteks",
    "seda": "sedavaloper1rzhv790ftxg3u5zsevuz8efqq37dq5gaqtktm3",
    "persistence": "persistencevaloper1etueaqe9teaamq40pln9xrncwgfns8mtdfr02c",
    "lava": "lava@valoper1askl4xtuwgt9ngll0unjp975fgk954y2fjpdc2",
    "nibiru": "nibivaloper1w26kzhwhely77xup3npfh70tzuc4amtx8j0743",
    "quicksilver": "quickvaloper1dqnwnf3rj8xwd82qra0v5zzkxd9szawy30k6fn",
    "sentinel": "sentvaloper1gcx3cq450dgmyha7s3x5mhjqcnxxn40tqykq20",
    "haqq": "haqqvaloper1dr24vnl8veae8998c78vth6qrrmtnhle49vjqg",
    "solana": "BH7asDZbKkTmT3UWiNfmMVRgQEEpXoVThGPmQfgWwDhg",
    "sui": "0x876e2ad4ba0375c7752d24ca47c69e7096e6dbfd82a215612a08f47cffebcfbc",
    "near": "01node.poolv1.near",
    "skale": "0x01daB98cb05D8652D791e3BCAE37Cf4b9BE5DBfd",
    "chainlink": "0x7A30E4B6307c0Db7AeF247A656b44d888B23a2DC",
}

COINGECKO_IDS: dict[str, str] = {
    "cosmos": "cosmos",
    "osmosis": "osmosis",
    "celestia": "celestia",
    "babylon": "babylon",
    "terra": "terra-luna-2",
    "union": "union-2",
    "neutron": "neutron-3",
    "xpla": "xpla",
    "agoric": "agoric",
    "zetachain": "zetachain",
    "dymension": "dymension",
    "nolus": "nolus",
    "seda": "seda-2",
    "persistence": "persistence",
    "lava": "lava-network",
    "nibiru": "nibiru",
    "quicksilver": "quicksilver",
    "sentinel": "sentinel",
    "haqq": "islamic-coin",
    "solana": "solana",
    "sui": "sui",
    "near": "near",
    "skale": "skale",
    "chainlink": "chainlink",
}

COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
ETHERSCAN_API_V2_URL = "https://api.etherscan.io/v2/api"

# Chainlink node operator
LINK_TOKEN_ADDRESS = "0x514910771AF9Ca656af840dff83E8264EcF986CA"
CHAINLINK_NODE_OPERATOR = VALIDATOR_ADDRESSES["chainlink"]
ETHEREUM_CHAIN_ID = 1

# SKALE reference data (validator id -> delegated SKL), taken from the
# SKALE portal; the staking contracts are proxies we do not read live.
SKALE_VALIDATORS: dict[int, str] = {
    10: "0x01daB98cb05D8652D791e3BCAE37Cf4b9BE5DBfd",
    43: "0xeDF5fDC9ddeDe9d37B265690695E31c86D5e8913",
}
SKALE_REFERENCE_DELEGATIONS: dict[int, int] = {
    10: 168_000_000,
    43: 45_000_000,
}
SKALE_REFERENCE_COMMISSION = 5.0

# Neutron revenue module: monthly USD quota per validator when the params
# endpoint cannot be read.
NEUTRON_DEFAULT_REWARD_QUOTE_USD = 3000.0
NEUTRON_DECIMALS = 6  # untrn

COSMOS_BONDED_PAGE_LIMIT = 500
