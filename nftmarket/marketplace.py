"""Marketplaces where NFTs are listed, bought and sold for a commission."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from typing import Any, Hashable

from nftmarket.dispatch import (
    MarketplaceError,
    MarketplaceErrorKind,
    Origin,
    check_bounds,
    ensure_root,
    ensure_signed,
)
from nftmarket.ledger import Balances, ExistenceRequirement
from nftmarket.market_types import (
    AccountAddedToAllowList,
    AccountAddedToDisallowList,
    AccountRemovedFromAllowList,
    AccountRemovedFromDisallowList,
    MarketplaceChangedOwner,
    MarketplaceCommissionFeeChanged,
    MarketplaceCreated,
    MarketplaceDescriptionUpdated,
    MarketplaceInformation,
    MarketplaceLimits,
    MarketplaceLogoUriUpdated,
    MarketplaceMintFeeChanged,
    MarketplaceNameChanged,
    MarketplaceType,
    MarketplaceTypeChanged,
    MarketplaceUriUpdated,
    NftListed,
    NftSold,
    NftUnlisted,
    SaleInformation,
)
from nftmarket.nfts import NFTs

__all__ = ["Marketplace"]

_U32_MAX = 2**32 - 1
_Kind = MarketplaceErrorKind


def _fail(kind: MarketplaceErrorKind) -> MarketplaceError:
    return MarketplaceError(kind)


def _swap_remove(items: list[Hashable], value: Hashable) -> None:
    """Remove the first ``value`` by moving the last item into its place."""
    try:
        index = items.index(value)
    except ValueError:
        raise _fail(_Kind.AccountNotFound) from None
    last = items.pop()
    if index < len(items):
        items[index] = last


class Marketplace:
    """Marketplaces, their settings, and the NFTs listed for sale on them."""

    def __init__(
        self,
        nfts: NFTs,
        balances: Balances,
        limits: MarketplaceLimits | None = None,
        marketplace_mint_fee: int = 0,
        marketplaces: Iterable[tuple[int, MarketplaceInformation]] = (),
        nfts_for_sale: Iterable[tuple[int, SaleInformation]] = (),
        fees_collector: Callable[[int], Any] | None = None,
    ) -> None:
        self.nfts = nfts
        self.balances = balances
        self.limits = limits or MarketplaceLimits()
        self.marketplace_mint_fee = marketplace_mint_fee
        self.fees_collector = fees_collector
        self.events: list[Any] = []
        self._marketplaces: dict[int, MarketplaceInformation] = {
            mkp_id: dataclasses.replace(info) for mkp_id, info in marketplaces
        }
        self._nfts_for_sale: dict[int, SaleInformation] = {
            nft_id: dataclasses.replace(sale) for nft_id, sale in nfts_for_sale
        }
        self._id_generator = 0

    @property
    def marketplace_id_generator(self) -> int:
        """The id of the most recently created marketplace."""
        return self._id_generator

    # -- calls ---------------------------------------------------------------

    def list(
        self, origin: Origin, nft_id: int, price: int, marketplace_id: int | None = None
    ) -> None:
        """List an owned NFT for sale on a marketplace (the default one is 0)."""
        account_id = ensure_signed(origin)
        mkp_id = 0 if marketplace_id is None else marketplace_id

        nft = self.nfts.get_nft(nft_id)
        if nft is None:
            raise _fail(_Kind.UnknownNFT)
        if nft.owner != account_id:
            raise _fail(_Kind.NotNftOwner)
        if nft.converted_to_capsule:
            raise _fail(_Kind.CannotListCapsules)
        if nft.listed_for_sale:
            raise _fail(_Kind.AlreadyListedForSale)
        if nft.viewer is not None:
            raise _fail(_Kind.CannotListLentNFTs)
        if self.nfts.is_nft_in_completed_series(nft_id) is not True:
            raise _fail(_Kind.SeriesNotCompleted)

        self.is_allowed_to_list(mkp_id, account_id)

        self.nfts.set_listed_for_sale(nft_id, True)
        self._nfts_for_sale[nft_id] = SaleInformation(account_id, price, mkp_id)
        self.events.append(NftListed(nft_id, price, mkp_id))

    def unlist(self, origin: Origin, nft_id: int) -> None:
        """Withdraw a listed NFT from sale; only its owner may do so."""
        who = ensure_signed(origin)
        if self.nfts.owner(nft_id) != who:
            raise _fail(_Kind.NotNftOwner)
        if nft_id not in self._nfts_for_sale:
            raise _fail(_Kind.NftNotForSale)

        self.nfts.set_listed_for_sale(nft_id, False)
        del self._nfts_for_sale[nft_id]
        self.events.append(NftUnlisted(nft_id))

    def buy(self, origin: Origin, nft_id: int) -> None:
        """Buy a listed NFT, paying the seller and the marketplace commission."""
        caller = ensure_signed(origin)
        sale = self._nfts_for_sale.get(nft_id)
        if sale is None:
            raise _fail(_Kind.NftNotForSale)
        if sale.account_id == caller:
            raise _fail(_Kind.NftAlreadyOwned)
        market = self._market(sale.marketplace_id)

        price = sale.price
        with self.balances.transaction():
            if market.commission_fee != 0:
                divisor = 100 // market.commission_fee
                if divisor == 0:
                    raise _fail(_Kind.InternalMathError)
                fee = price // divisor
                price -= fee
                self.balances.transfer(
                    caller, market.owner, fee, ExistenceRequirement.KEEP_ALIVE
                )
            self.balances.transfer(
                caller, sale.account_id, price, ExistenceRequirement.KEEP_ALIVE
            )
            self.nfts.set_listed_for_sale(nft_id, False)
            self.nfts.set_owner(nft_id, caller)

        del self._nfts_for_sale[nft_id]
        self.events.append(NftSold(nft_id, caller))

    def create(
        self,
        origin: Origin,
        kind: MarketplaceType,
        commission_fee: int,
        name: bytes,
        uri: bytes | None = None,
        logo_uri: bytes | None = None,
        description: bytes | None = None,
    ) -> None:
        """Create a marketplace owned by the caller, charging the mint fee."""
        caller_id = ensure_signed(origin)
        self._check_commission_fee(commission_fee)
        name = bytes(name)
        self._check_name(name)
        if uri is not None:
            uri = bytes(uri)
            self._check_uri(uri)
        if logo_uri is not None:
            logo_uri = bytes(logo_uri)
            self._check_logo_uri(logo_uri)
        if description is not None:
            description = bytes(description)
            self._check_description(description)

        with self.balances.transaction():
            taken = self.balances.withdraw(
                caller_id, self.marketplace_mint_fee, ExistenceRequirement.KEEP_ALIVE
            )
            if self._id_generator >= _U32_MAX:
                raise _fail(_Kind.MarketplaceIdOverflow)
            if self.fees_collector is not None and taken:
                self.fees_collector(taken)

        mkp_id = self._id_generator + 1
        self._marketplaces[mkp_id] = MarketplaceInformation(
            kind=kind,
            commission_fee=commission_fee,
            owner=caller_id,
            allow_list=[],
            disallow_list=[],
            name=name,
            uri=uri,
            logo_uri=logo_uri,
            description=description,
        )
        self._id_generator = mkp_id
        self.events.append(MarketplaceCreated(mkp_id, caller_id))

    def add_account_to_allow_list(
        self, origin: Origin, marketplace_id: int, account_id: Hashable
    ) -> None:
        """Let an account list on a private marketplace."""
        market = self._owned(origin, marketplace_id, MarketplaceType.PRIVATE)
        market.allow_list.append(account_id)
        self.events.append(AccountAddedToAllowList(marketplace_id, account_id))

    def remove_account_from_allow_list(
        self, origin: Origin, marketplace_id: int, account_id: Hashable
    ) -> None:
        """Take an account off the allow list of a private marketplace."""
        market = self._owned(origin, marketplace_id, MarketplaceType.PRIVATE)
        _swap_remove(market.allow_list, account_id)
        self.events.append(AccountRemovedFromAllowList(marketplace_id, account_id))

    def add_account_to_disallow_list(
        self, origin: Origin, marketplace_id: int, account_id: Hashable
    ) -> None:
        """Bar an account from listing on a public marketplace."""
        market = self._owned(origin, marketplace_id, MarketplaceType.PUBLIC)
        market.disallow_list.append(account_id)
        self.events.append(AccountAddedToDisallowList(marketplace_id, account_id))

    def remove_account_from_disallow_list(
        self, origin: Origin, marketplace_id: int, account_id: Hashable
    ) -> None:
        """Take an account off the disallow list of a public marketplace."""
        market = self._owned(origin, marketplace_id, MarketplaceType.PUBLIC)
        _swap_remove(market.disallow_list, account_id)
        self.events.append(AccountRemovedFromDisallowList(marketplace_id, account_id))

    def set_owner(self, origin: Origin, marketplace_id: int, account_id: Hashable) -> None:
        """Hand a marketplace over to another account."""
        market = self._owned(origin, marketplace_id)
        market.owner = account_id
        self.events.append(MarketplaceChangedOwner(marketplace_id, account_id))

    def set_market_type(
        self, origin: Origin, marketplace_id: int, kind: MarketplaceType
    ) -> None:
        """Switch a marketplace between public and private."""
        market = self._owned(origin, marketplace_id)
        market.kind = kind
        self.events.append(MarketplaceTypeChanged(marketplace_id, kind))

    def set_name(self, origin: Origin, marketplace_id: int, name: bytes) -> None:
        """Rename a marketplace."""
        who = ensure_signed(origin)
        name = bytes(name)
        self._check_name(name)
        market = self._owned_by(who, marketplace_id)
        market.name = name
        self.events.append(MarketplaceNameChanged(marketplace_id, name))

    def set_marketplace_mint_fee(self, origin: Origin, mint_fee: int) -> None:
        """Change the fee charged for creating a marketplace; root only."""
        ensure_root(origin)
        self.marketplace_mint_fee = mint_fee
        self.events.append(MarketplaceMintFeeChanged(mint_fee))

    def set_commission_fee(
        self, origin: Origin, marketplace_id: int, commission_fee: int
    ) -> None:
        """Change the percentage a marketplace takes from each sale."""
        who = ensure_signed(origin)
        self._check_commission_fee(commission_fee)
        market = self._owned_by(who, marketplace_id)
        market.commission_fee = commission_fee
        self.events.append(MarketplaceCommissionFeeChanged(marketplace_id, commission_fee))

    def set_uri(self, origin: Origin, marketplace_id: int, uri: bytes) -> None:
        """Change the uri of a marketplace."""
        who = ensure_signed(origin)
        uri = bytes(uri)
        self._check_uri(uri)
        market = self._owned_by(who, marketplace_id)
        market.uri = uri
        self.events.append(MarketplaceUriUpdated(marketplace_id, uri))

    def set_logo_uri(self, origin: Origin, marketplace_id: int, logo_uri: bytes) -> None:
        """Change the logo uri of a marketplace."""
        who = ensure_signed(origin)
        logo_uri = bytes(logo_uri)
        self._check_logo_uri(logo_uri)
        market = self._owned_by(who, marketplace_id)
        market.logo_uri = logo_uri
        self.events.append(MarketplaceLogoUriUpdated(marketplace_id, logo_uri))

    def set_description(
        self, origin: Origin, marketplace_id: int, description: bytes
    ) -> None:
        """Change the description of a marketplace."""
        who = ensure_signed(origin)
        description = bytes(description)
        self._check_description(description)
        market = self._owned_by(who, marketplace_id)
        market.description = description
        self.events.append(MarketplaceDescriptionUpdated(marketplace_id, description))

    # -- queries -------------------------------------------------------------

    def nft_for_sale(self, nft_id: int) -> SaleInformation | None:
        """A copy of the listing of ``nft_id``, or ``None``."""
        sale = self._nfts_for_sale.get(nft_id)
        return dataclasses.replace(sale) if sale is not None else None

    def marketplaces(self, marketplace_id: int) -> MarketplaceInformation | None:
        """A copy of the stored marketplace, or ``None``."""
        market = self._marketplaces.get(marketplace_id)
        return dataclasses.replace(market) if market is not None else None

    # -- interface used by other modules -------------------------------------

    def is_allowed_to_list(self, marketplace_id: int, account_id: Hashable) -> None:
        """Raise unless ``account_id`` may list on the marketplace."""
        market = self._market(marketplace_id)
        if market.kind is MarketplaceType.PRIVATE:
            allowed = account_id in market.allow_list
        else:
            allowed = account_id not in market.disallow_list
        if not allowed:
            raise _fail(_Kind.NotAllowedToList)

    def get_marketplace(self, marketplace_id: int) -> MarketplaceInformation | None:
        return self.marketplaces(marketplace_id)

    def create_marketplace(
        self,
        caller_id: Hashable,
        kind: MarketplaceType,
        commission_fee: int,
        name: bytes,
        uri: bytes | None = None,
        logo_uri: bytes | None = None,
        description: bytes | None = None,
    ) -> int:
        """Create a marketplace for ``caller_id`` and return its id."""
        self.create(
            Origin.signed(caller_id), kind, commission_fee, name, uri, logo_uri, description
        )
        return self._id_generator

    # -- internals -----------------------------------------------------------

    def _market(self, marketplace_id: int) -> MarketplaceInformation:
        try:
            return self._marketplaces[marketplace_id]
        except KeyError:
            raise _fail(_Kind.UnknownMarketplace) from None

    def _owned_by(self, who: Hashable, marketplace_id: int) -> MarketplaceInformation:
        market = self._market(marketplace_id)
        if market.owner != who:
            raise _fail(_Kind.NotMarketplaceOwner)
        return market

    def _owned(
        self,
        origin: Origin,
        marketplace_id: int,
        required_kind: MarketplaceType | None = None,
    ) -> MarketplaceInformation:
        who = ensure_signed(origin)
        market = self._owned_by(who, marketplace_id)
        if required_kind is not None and market.kind is not required_kind:
            raise _fail(_Kind.UnsupportedMarketplace)
        return market

    @staticmethod
    def _check_commission_fee(commission_fee: int) -> None:
        if not 0 <= commission_fee <= 100:
            raise _fail(_Kind.InvalidCommissionFeeValue)

    def _check_name(self, name: bytes) -> None:
        check_bounds(
            len(name),
            self.limits.min_name_len,
            self.limits.max_name_len,
            _fail(_Kind.TooShortMarketplaceName),
            _fail(_Kind.TooLongMarketplaceName),
        )

    def _check_uri(self, uri: bytes) -> None:
        check_bounds(
            len(uri),
            self.limits.min_uri_len,
            self.limits.max_uri_len,
            _fail(_Kind.TooShortUri),
            _fail(_Kind.TooLongUri),
        )

    def _check_logo_uri(self, logo_uri: bytes) -> None:
        check_bounds(
            len(logo_uri),
            self.limits.min_uri_len,
            self.limits.max_uri_len,
            _fail(_Kind.TooShortLogoUri),
            _fail(_Kind.TooLongLogoUri),
        )

    def _check_description(self, description: bytes) -> None:
        check_bounds(
            len(description),
            self.limits.min_description_len,
            self.limits.max_description_len,
            _fail(_Kind.TooShortDescription),
            _fail(_Kind.TooLongDescription),
        )