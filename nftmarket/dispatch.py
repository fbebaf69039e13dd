"""Call origins, pallet errors and shared validation helpers."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Hashable

__all__ = [
    "Origin",
    "ensure_signed",
    "ensure_root",
    "PalletError",
    "BadOrigin",
    "InsufficientBalance",
    "NFTErrorKind",
    "NFTError",
    "MarketplaceErrorKind",
    "MarketplaceError",
    "check_bounds",
]


@dataclass(frozen=True)
class Origin:
    """Who dispatched a call: a signed account or the root authority."""

    account: Hashable | None = None
    is_root: bool = False

    @classmethod
    def signed(cls, account: Hashable) -> "Origin":
        """An origin signed by ``account``."""
        return cls(account=account, is_root=False)

    @classmethod
    def root(cls) -> "Origin":
        """The privileged root origin."""
        return cls(account=None, is_root=True)

    @property
    def is_signed(self) -> bool:
        return not self.is_root


class PalletError(Exception):
    """Base class of every error a call can fail with."""


class BadOrigin(PalletError):
    """The call was dispatched from an origin that may not make it."""

    def __init__(self, message: str = "BadOrigin") -> None:
        super().__init__(message)


class InsufficientBalance(PalletError):
    """An account does not hold enough funds for the operation."""

    def __init__(self, message: str = "InsufficientBalance") -> None:
        super().__init__(message)


def ensure_signed(origin: Origin) -> Any:
    """Return the signing account, or raise BadOrigin for a root origin."""
    if not origin.is_signed:
        raise BadOrigin()
    return origin.account


def ensure_root(origin: Origin) -> None:
    """Raise BadOrigin unless the origin is root."""
    if not origin.is_root:
        raise BadOrigin()


class NFTErrorKind(enum.Enum):
    """Reasons an NFT operation can be refused."""

    CannotTransferCapsules = enum.auto()
    CannotBurnCapsules = enum.auto()
    CannotLendCapsules = enum.auto()
    CannotTransferNFTsListedForSale = enum.auto()
    CannotBurnNFTsListedForSale = enum.auto()
    CannotLendNFTsListedForSale = enum.auto()
    CannotTransferNFTsInTransmission = enum.auto()
    CannotBurnNFTsInTransmission = enum.auto()
    CannotLendNFTsInTransmission = enum.auto()
    CannotTransferLentNFTs = enum.auto()
    CannotBurnLentNFTs = enum.auto()
    CannotTransferNFTsInUncompletedSeries = enum.auto()
    CannotCreateNFTsWithCompletedSeries = enum.auto()
    IPFSReferenceIsTooShort = enum.auto()
    IPFSReferenceIsTooLong = enum.auto()
    NFTNotFound = enum.auto()
    NotTheNFTOwner = enum.auto()
    NotTheSeriesOwner = enum.auto()
    SeriesNotFound = enum.auto()


class NFTError(PalletError):
    """An NFT operation was refused."""

    def __init__(self, kind: NFTErrorKind) -> None:
        super().__init__(kind.name)
        self.kind = kind


class MarketplaceErrorKind(enum.Enum):
    """Reasons a marketplace operation can be refused."""

    CannotListLentNFTs = enum.auto()
    NotNftOwner = enum.auto()
    NftNotForSale = enum.auto()
    NftAlreadyOwned = enum.auto()
    WrongCurrencyUsed = enum.auto()
    MarketplaceIdOverflow = enum.auto()
    UnknownMarketplace = enum.auto()
    InvalidCommissionFeeValue = enum.auto()
    NotMarketplaceOwner = enum.auto()
    UnsupportedMarketplace = enum.auto()
    AccountNotFound = enum.auto()
    InternalMathError = enum.auto()
    NotAllowedToList = enum.auto()
    TooShortMarketplaceName = enum.auto()
    TooLongMarketplaceName = enum.auto()
    SeriesNotCompleted = enum.auto()
    TooLongUri = enum.auto()
    TooShortUri = enum.auto()
    TooLongLogoUri = enum.auto()
    TooShortLogoUri = enum.auto()
    CannotListCapsules = enum.auto()
    TooShortDescription = enum.auto()
    TooLongDescription = enum.auto()
    AlreadyListedForSale = enum.auto()
    UnknownNFT = enum.auto()


class MarketplaceError(PalletError):
    """A marketplace operation was refused."""

    def __init__(self, kind: MarketplaceErrorKind) -> None:
        super().__init__(kind.name)
        self.kind = kind


def check_bounds(
    length: int,
    minimum: int,
    maximum: int,
    too_short: PalletError,
    too_long: PalletError,
) -> None:
    """Raise ``too_short`` below ``minimum`` or ``too_long`` above ``maximum``."""
    if length < minimum:
        raise too_short
    if length > maximum:
        raise too_long