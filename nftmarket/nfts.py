"""Non-fungible tokens grouped in series, with minting fees and lending."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Hashable

from nftmarket.dispatch import (
    NFTError,
    NFTErrorKind,
    Origin,
    check_bounds,
    ensure_root,
    ensure_signed,
)
from nftmarket.ledger import Balances, ExistenceRequirement

__all__ = [
    "NFTData",
    "SeriesDetails",
    "NFTCreated",
    "NFTTransferred",
    "NFTBurned",
    "SeriesFinished",
    "NFTMintFeeUpdated",
    "NFTLent",
    "u32_to_text",
    "NFTs",
]

_U32_MAX = 2**32 - 1


@dataclass
class NFTData:
    """Everything stored about one NFT."""

    owner: Hashable
    ipfs_reference: bytes
    series_id: bytes
    creator: Hashable | None = None
    listed_for_sale: bool = False
    in_transmission: bool = False
    converted_to_capsule: bool = False
    viewer: Hashable | None = None

    def __post_init__(self) -> None:
        self.ipfs_reference = bytes(self.ipfs_reference)
        self.series_id = bytes(self.series_id)
        if self.creator is None:
            self.creator = self.owner


@dataclass
class SeriesDetails:
    """A series of NFTs; while in draft its owner may still add to it."""

    owner: Hashable
    draft: bool = True


@dataclass(frozen=True)
class NFTCreated:
    nft_id: int
    owner: Hashable
    series_id: bytes
    ipfs_reference: bytes
    mint_fee: int


@dataclass(frozen=True)
class NFTTransferred:
    nft_id: int
    old_owner: Hashable
    new_owner: Hashable


@dataclass(frozen=True)
class NFTBurned:
    nft_id: int


@dataclass(frozen=True)
class SeriesFinished:
    series_id: bytes


@dataclass(frozen=True)
class NFTMintFeeUpdated:
    fee: int


@dataclass(frozen=True)
class NFTLent:
    nft_id: int
    viewer: Hashable | None


def u32_to_text(num: int) -> bytes:
    """The decimal ASCII digits of ``num``."""
    if not 0 <= num <= _U32_MAX:
        raise OverflowError(f"{num} does not fit in an unsigned 32-bit integer")
    return str(num).encode("ascii")


def _next_u32(value: int) -> int:
    if value >= _U32_MAX:
        raise OverflowError("identifier space exhausted")
    return value + 1


class NFTs:
    """Registry of NFTs and series, charging a mint fee on creation."""

    def __init__(
        self,
        balances: Balances,
        min_ipfs_len: int = 1,
        max_ipfs_len: int = 5,
        nft_mint_fee: int = 0,
        fees_collector: Callable[[int], Any] | None = None,
        nfts: Iterable[tuple[int, NFTData]] = (),
        series: Iterable[tuple[bytes, SeriesDetails]] = (),
    ) -> None:
        self.balances = balances
        self.min_ipfs_len = min_ipfs_len
        self.max_ipfs_len = max_ipfs_len
        self.nft_mint_fee = nft_mint_fee
        self.fees_collector = fees_collector
        self.events: list[Any] = []
        self._series: dict[bytes, SeriesDetails] = {
            bytes(sid): dataclasses.replace(details) for sid, details in series
        }
        self._data: dict[int, NFTData] = {}
        for nft_id, data in nfts:
            self._data[nft_id] = dataclasses.replace(data)
        self._nft_id_generator = max(self._data) + 1 if self._data else 0
        self._series_id_generator = 0

    @property
    def nft_id_generator(self) -> int:
        """The id the next created NFT will get."""
        return self._nft_id_generator

    @property
    def series_id_generator(self) -> int:
        """Where the search for the next free numeric series id starts."""
        return self._series_id_generator

    # -- calls ---------------------------------------------------------------

    def create(self, origin: Origin, ipfs_reference: bytes, series_id: bytes | None = None) -> None:
        """Mint a new NFT owned by the caller, optionally into a series."""
        who = ensure_signed(origin)
        ipfs_reference = bytes(ipfs_reference)
        series_id = bytes(series_id) if series_id is not None else None

        check_bounds(
            len(ipfs_reference),
            self.min_ipfs_len,
            self.max_ipfs_len,
            NFTError(NFTErrorKind.IPFSReferenceIsTooShort),
            NFTError(NFTErrorKind.IPFSReferenceIsTooLong),
        )

        mint_fee = self.nft_mint_fee
        with self.balances.transaction():
            taken = self.balances.withdraw(who, mint_fee, ExistenceRequirement.KEEP_ALIVE)

            series_exists = False
            if series_id is not None:
                existing = self._series.get(series_id)
                if existing is not None:
                    if existing.owner != who:
                        raise NFTError(NFTErrorKind.NotTheSeriesOwner)
                    if not existing.draft:
                        raise NFTError(NFTErrorKind.CannotCreateNFTsWithCompletedSeries)
                    series_exists = True

            if self.fees_collector is not None and taken:
                self.fees_collector(taken)

        nft_id = self._generate_nft_id()
        if series_id is None:
            series_id = self._generate_series_id()

        self._data[nft_id] = NFTData(who, ipfs_reference, series_id)
        if not series_exists:
            self._series[series_id] = SeriesDetails(who, True)

        self.events.append(NFTCreated(nft_id, who, series_id, ipfs_reference, mint_fee))

    def transfer(self, origin: Origin, nft_id: int, to: Hashable) -> None:
        """Give an NFT to another account; only its owner may do so."""
        who = ensure_signed(origin)
        data = self._nft(nft_id)
        series = self._series.get(data.series_id)
        if series is None:
            raise NFTError(NFTErrorKind.SeriesNotFound)

        if data.owner != who:
            raise NFTError(NFTErrorKind.NotTheNFTOwner)
        if data.listed_for_sale:
            raise NFTError(NFTErrorKind.CannotTransferNFTsListedForSale)
        if data.converted_to_capsule:
            raise NFTError(NFTErrorKind.CannotTransferCapsules)
        if data.in_transmission:
            raise NFTError(NFTErrorKind.CannotTransferNFTsInTransmission)
        if data.viewer is not None:
            raise NFTError(NFTErrorKind.CannotTransferLentNFTs)
        if series.draft:
            raise NFTError(NFTErrorKind.CannotTransferNFTsInUncompletedSeries)

        data.owner = to
        self.events.append(NFTTransferred(nft_id, who, to))

    def burn(self, origin: Origin, nft_id: int) -> None:
        """Destroy an NFT for good; only its owner may do so."""
        who = ensure_signed(origin)
        data = self._nft(nft_id)

        if data.owner != who:
            raise NFTError(NFTErrorKind.NotTheNFTOwner)
        if data.listed_for_sale:
            raise NFTError(NFTErrorKind.CannotBurnNFTsListedForSale)
        if data.converted_to_capsule:
            raise NFTError(NFTErrorKind.CannotBurnCapsules)
        if data.in_transmission:
            raise NFTError(NFTErrorKind.CannotBurnNFTsInTransmission)
        if data.viewer is not None:
            raise NFTError(NFTErrorKind.CannotBurnLentNFTs)

        del self._data[nft_id]
        self.events.append(NFTBurned(nft_id))

    def finish_series(self, origin: Origin, series_id: bytes) -> None:
        """Complete a series so that no NFT can be added to it any more."""
        who = ensure_signed(origin)
        series_id = bytes(series_id)
        series = self._series.get(series_id)
        if series is None:
            raise NFTError(NFTErrorKind.SeriesNotFound)
        if series.owner != who:
            raise NFTError(NFTErrorKind.NotTheSeriesOwner)
        series.draft = False
        self.events.append(SeriesFinished(series_id))

    def set_nft_mint_fee(self, origin: Origin, mint_fee: int) -> None:
        """Change the fee charged for minting; root only."""
        ensure_root(origin)
        self.nft_mint_fee = mint_fee
        self.events.append(NFTMintFeeUpdated(mint_fee))

    def lend(self, origin: Origin, nft_id: int, viewer: Hashable | None) -> None:
        """Lend an NFT to ``viewer``, or take it back with ``None``."""
        who = ensure_signed(origin)
        data = self._nft(nft_id)

        if data.owner != who:
            raise NFTError(NFTErrorKind.NotTheNFTOwner)
        if data.listed_for_sale:
            raise NFTError(NFTErrorKind.CannotLendNFTsListedForSale)
        if data.converted_to_capsule:
            raise NFTError(NFTErrorKind.CannotLendCapsules)
        if data.in_transmission:
            raise NFTError(NFTErrorKind.CannotLendNFTsInTransmission)

        data.viewer = viewer
        self.events.append(NFTLent(nft_id, viewer))

    # -- queries -------------------------------------------------------------

    def data(self, nft_id: int) -> NFTData | None:
        """A copy of the stored NFT, or ``None``."""
        data = self._data.get(nft_id)
        return dataclasses.replace(data) if data is not None else None

    def series(self, series_id: bytes) -> SeriesDetails | None:
        """A copy of the stored series, or ``None``."""
        details = self._series.get(bytes(series_id))
        return dataclasses.replace(details) if details is not None else None

    # -- interface used by other modules -------------------------------------

    def set_owner(self, nft_id: int, owner: Hashable) -> None:
        self._nft(nft_id).owner = owner

    def owner(self, nft_id: int) -> Hashable | None:
        data = self._data.get(nft_id)
        return data.owner if data is not None else None

    def is_nft_in_completed_series(self, nft_id: int) -> bool | None:
        data = self._data.get(nft_id)
        if data is None:
            return None
        series = self._series.get(data.series_id)
        if series is None:
            return None
        return not series.draft

    def create_nft(self, owner: Hashable, ipfs_reference: bytes, series_id: bytes | None = None) -> int:
        """Mint an NFT for ``owner`` and return its id."""
        self.create(Origin.signed(owner), ipfs_reference, series_id)
        return self._nft_id_generator - 1

    def get_nft(self, nft_id: int) -> NFTData | None:
        return self.data(nft_id)

    def lock_series(self, series_id: bytes) -> None:
        """Mark a series completed without any owner check."""
        series = self._series.get(bytes(series_id))
        if series is None:
            raise NFTError(NFTErrorKind.SeriesNotFound)
        series.draft = False

    def set_listed_for_sale(self, nft_id: int, value: bool) -> None:
        self._nft(nft_id).listed_for_sale = value

    def is_listed_for_sale(self, nft_id: int) -> bool | None:
        data = self._data.get(nft_id)
        return data.listed_for_sale if data is not None else None

    def set_in_transmission(self, nft_id: int, value: bool) -> None:
        self._nft(nft_id).in_transmission = value

    def is_in_transmission(self, nft_id: int) -> bool | None:
        data = self._data.get(nft_id)
        return data.in_transmission if data is not None else None

    def set_converted_to_capsule(self, nft_id: int, value: bool) -> None:
        self._nft(nft_id).converted_to_capsule = value

    def is_converted_to_capsule(self, nft_id: int) -> bool | None:
        data = self._data.get(nft_id)
        return data.converted_to_capsule if data is not None else None

    def set_series_completion(self, series_id: bytes, value: bool) -> None:
        series = self._series.get(bytes(series_id))
        if series is None:
            raise NFTError(NFTErrorKind.SeriesNotFound)
        series.draft = not value

    def set_viewer(self, nft_id: int, viewer: Hashable | None) -> None:
        self._nft(nft_id).viewer = viewer

    # -- internals -----------------------------------------------------------

    def _nft(self, nft_id: int) -> NFTData:
        try:
            return self._data[nft_id]
        except KeyError:
            raise NFTError(NFTErrorKind.NFTNotFound) from None

    def _generate_nft_id(self) -> int:
        nft_id = self._nft_id_generator
        self._nft_id_generator = _next_u32(nft_id)
        return nft_id

    def _generate_series_id(self) -> bytes:
        candidate = self._series_id_generator
        while u32_to_text(candidate) in self._series:
            candidate = _next_u32(candidate)
        self._series_id_generator = _next_u32(candidate)
        return u32_to_text(candidate)