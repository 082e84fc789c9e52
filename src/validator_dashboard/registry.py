"""Static network registry: which validators exist and how to describe them."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .constants import COINGECKO_IDS, VALIDATOR_ADDRESSES
from .domain import AprRange, Ecosystem, NetworkRegistryEntry, NetworkStatus
from .errors import RegistryError
from .logger import get_logger
from .settings import DashboardSettings

logger = get_logger(__name__)

_REGISTRY_ADAPTER = TypeAdapter(list[NetworkRegistryEntry])


def _cosmos(
    network_id: str,
    name: str,
    token: str,
    apr: tuple[float, float] | None,
    **extra: Any,
) -> NetworkRegistryEntry:
    return NetworkRegistryEntry(
        id=network_id,
        name=name,
        token=token,
        ecosystem=Ecosystem.COSMOS,
        apr=AprRange(*apr) if apr else None,
        address=VALIDATOR_ADDRESSES.get(network_id),
        price_id=COINGECKO_IDS.get(network_id),
        **extra,
    )


DEFAULT_REGISTRY: list[NetworkRegistryEntry] = [
    _cosmos("cosmos", "Cosmos Hub", "ATOM", (15.0, 20.0)),
    _cosmos("osmosis", "Osmosis", "OSMO", (1.5, 3.0)),
    _cosmos("celestia", "Celestia", "TIA", (8.0, 11.0)),
    _cosmos("babylon", "Babylon Genesis", "BABY", (6.0, 9.0)),
    _cosmos("terra", "Terra", "LUNA", (6.0, 9.0)),
    _cosmos("union", "Union", "U", (8.0, 14.0)),
    _cosmos("neutron", "Neutron", "NTRN", None, adapter="neutron"),
    _cosmos("xpla", "XPLA", "XPLA", (7.0, 10.0)),
    _cosmos("agoric", "Agoric", "BLD", (8.0, 12.0)),
    _cosmos("zetachain", "ZetaChain", "ZETA", (9.0, 13.0)),
    _cosmos("dymension", "Dymension", "DYM", (5.0, 8.0)),
    _cosmos("nolus", "Nolus", "NLS", (12.0, 18.0)),
    _cosmos("seda", "SEDA", "SEDA", (10.0, 15.0)),
    _cosmos("persistence", "Persistence", "XPRT", (14.0, 18.0)),
    _cosmos("lava", "Lava Network", "LAVA", (10.0, 15.0)),
    _cosmos("nibiru", "Nibiru", "NIBI", (8.0, 12.0)),
    _cosmos("quicksilver", "Quicksilver", "QCK", (9.0, 13.0)),
    _cosmos("sentinel", "Sentinel", "DVPN", (14.0, 20.0)),
    _cosmos("haqq", "HAQQ", "ISLM", (4.0, 7.0)),
    NetworkRegistryEntry(
        id="solana",
        name="Solana",
        token="SOL",
        ecosystem=Ecosystem.SOLANA,
        apr=AprRange(6.5, 7.5),
        address=VALIDATOR_ADDRESSES["solana"],
        price_id=COINGECKO_IDS["solana"],
    ),
    NetworkRegistryEntry(
        id="sui",
        name="Sui",
        token="SUI",
        ecosystem=Ecosystem.SUI,
        apr=AprRange(2.5, 3.5),
        address=VALIDATOR_ADDRESSES["sui"],
        price_id=COINGECKO_IDS["sui"],
    ),
    NetworkRegistryEntry(
        id="near",
        name="NEAR Protocol",
        token="NEAR",
        ecosystem=Ecosystem.NEAR,
        apr=AprRange(8.0, 10.0),
        address=VALIDATOR_ADDRESSES["near"],
        price_id=COINGECKO_IDS["near"],
    ),
    NetworkRegistryEntry(
        id="skale",
        name="SKALE",
        token="SKL",
        ecosystem=Ecosystem.OTHER,
        apr=AprRange(7.0, 9.0),
        address=VALIDATOR_ADDRESSES["skale"],
        price_id=COINGECKO_IDS["skale"],
        adapter="skale",
    ),
    NetworkRegistryEntry(
        id="chainlink",
        name="Chainlink",
        token="LINK",
        ecosystem=Ecosystem.ETHEREUM,
        address=VALIDATOR_ADDRESSES["chainlink"],
        price_id=COINGECKO_IDS["chainlink"],
        adapter="chainlink",
    ),
    NetworkRegistryEntry(
        id="ethereum",
        name="Ethereum",
        token="ETH",
        ecosystem=Ecosystem.ETHEREUM,
        apr=AprRange(2.8, 3.5),
        status=NetworkStatus.COMING_SOON,
        price_id="ethereum",
    ),
]


def parse_registry(raw: Any) -> list[NetworkRegistryEntry]:
    """Validate raw registry data (a list of mappings).

    Raises:
        RegistryError: On schema violations or duplicate network ids.
    """
    try:
        entries = _REGISTRY_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise RegistryError(f"Invalid network registry: {e}") from e

    seen: set[str] = set()
    duplicates = []
    for entry in entries:
        if entry.id in seen:
            duplicates.append(entry.id)
        seen.add(entry.id)
    if duplicates:
        raise RegistryError(
            f"Duplicate network ids in registry: {', '.join(sorted(set(duplicates)))}"
        )
    return entries


def load_registry_file(path: Path) -> list[NetworkRegistryEntry]:
    """Load ``[[networks]]`` tables from a TOML registry file."""
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise RegistryError(f"Cannot read network registry {path}: {e}") from e

    networks = data.get("networks")
    if not isinstance(networks, list):
        raise RegistryError(f"Registry file {path} has no [[networks]] entries")
    return parse_registry(networks)


def load_registry(settings: DashboardSettings) -> list[NetworkRegistryEntry]:
    """Return the configured registry, optionally restricted to some ids.

    Raises:
        RegistryError: If the registry file is unreadable or invalid, or
            ``settings.networks`` names an unknown network.
    """
    if settings.registry_path is not None:
        entries = load_registry_file(settings.registry_path)
        logger.debug(
            "Loaded %d networks from %s", len(entries), settings.registry_path
        )
    else:
        entries = list(DEFAULT_REGISTRY)

    if not settings.networks:
        return entries

    wanted = {network_id.lower() for network_id in settings.networks}
    unknown = wanted - {entry.id for entry in entries}
    if unknown:
        raise RegistryError(
            f"Unknown network(s): {', '.join(sorted(unknown))}. "
            f"Available: {', '.join(entry.id for entry in entries)}"
        )
    return [entry for entry in entries if entry.id in wanted]
