"""Records, limits and events of the marketplace."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Hashable

__all__ = [
    "MarketplaceType",
    "MarketplaceInformation",
    "SaleInformation",
    "MarketplaceLimits",
    "NftListed",
    "NftUnlisted",
    "NftSold",
    "MarketplaceCreated",
    "AccountAddedToAllowList",
    "AccountRemovedFromAllowList",
    "MarketplaceChangedOwner",
    "MarketplaceTypeChanged",
    "MarketplaceNameChanged",
    "MarketplaceMintFeeChanged",
    "MarketplaceCommissionFeeChanged",
    "MarketplaceUriUpdated",
    "MarketplaceLogoUriUpdated",
    "AccountAddedToDisallowList",
    "AccountRemovedFromDisallowList",
    "MarketplaceDescriptionUpdated",
]


class MarketplaceType(enum.Enum):
    """Public marketplaces refuse a disallow list; private ones admit an allow list."""

    PUBLIC = "public"
    PRIVATE = "private"


def _optional_bytes(value: bytes | None) -> bytes | None:
    return bytes(value) if value is not None else None


@dataclass
class MarketplaceInformation:
    """Everything stored about one marketplace."""

    kind: MarketplaceType
    commission_fee: int
    owner: Hashable
    allow_list: list[Hashable] = field(default_factory=list)
    disallow_list: list[Hashable] = field(default_factory=list)
    name: bytes = b""
    uri: bytes | None = None
    logo_uri: bytes | None = None
    description: bytes | None = None

    def __post_init__(self) -> None:
        self.allow_list = list(self.allow_list)
        self.disallow_list = list(self.disallow_list)
        self.name = bytes(self.name)
        self.uri = _optional_bytes(self.uri)
        self.logo_uri = _optional_bytes(self.logo_uri)
        self.description = _optional_bytes(self.description)


@dataclass
class SaleInformation:
    """A listing: who sells, at what price, on which marketplace."""

    account_id: Hashable = None
    price: int = 0
    marketplace_id: int = 0


@dataclass(frozen=True)
class MarketplaceLimits:
    """Inclusive length bounds of marketplace names, descriptions and uris."""

    min_name_len: int = 1
    max_name_len: int = 5
    min_description_len: int = 1
    max_description_len: int = 500
    min_uri_len: int = 1
    max_uri_len: int = 5

    def __post_init__(self) -> None:
        pairs = (
            ("name", self.min_name_len, self.max_name_len),
            ("description", self.min_description_len, self.max_description_len),
            ("uri", self.min_uri_len, self.max_uri_len),
        )
        for label, low, high in pairs:
            if low < 0 or high < 0:
                raise ValueError(f"{label} length bounds cannot be negative")
            if low > high:
                raise ValueError(f"minimum {label} length exceeds the maximum")


@dataclass(frozen=True)
class NftListed:
    nft_id: int
    price: int
    marketplace_id: int


@dataclass(frozen=True)
class NftUnlisted:
    nft_id: int


@dataclass(frozen=True)
class NftSold:
    nft_id: int
    owner: Hashable


@dataclass(frozen=True)
class MarketplaceCreated:
    marketplace_id: int
    owner: Hashable


@dataclass(frozen=True)
class AccountAddedToAllowList:
    marketplace_id: int
    owner: Hashable


@dataclass(frozen=True)
class AccountRemovedFromAllowList:
    marketplace_id: int
    owner: Hashable


@dataclass(frozen=True)
class MarketplaceChangedOwner:
    marketplace_id: int
    owner: Hashable


@dataclass(frozen=True)
class MarketplaceTypeChanged:
    marketplace_id: int
    kind: MarketplaceType


@dataclass(frozen=True)
class MarketplaceNameChanged:
    marketplace_id: int
    name: bytes


@dataclass(frozen=True)
class MarketplaceMintFeeChanged:
    fee: int


@dataclass(frozen=True)
class MarketplaceCommissionFeeChanged:
    marketplace_id: int
    fee: int


@dataclass(frozen=True)
class MarketplaceUriUpdated:
    marketplace_id: int
    uri: bytes


@dataclass(frozen=True)
class MarketplaceLogoUriUpdated:
    marketplace_id: int
    uri: bytes


@dataclass(frozen=True)
class AccountAddedToDisallowList:
    marketplace_id: int
    account_id: Hashable


@dataclass(frozen=True)
class AccountRemovedFromDisallowList:
    marketplace_id: int
    account_id: Hashable


@dataclass(frozen=True)
class MarketplaceDescriptionUpdated:
    marketplace_id: int
    description: bytes