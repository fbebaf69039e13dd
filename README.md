# nftmarket

An in-memory model of an NFT registry and of the marketplaces where NFTs are
listed and sold. It keeps account balances and applies the rules of both.
Every call checks its conditions before it changes anything. If a call fails
after balances have started to move, for example during a minting fee or a
purchase, those balance changes are rolled back.

## Installation

```
pip install .
```

To run the tests, install the `test` extra and run `pytest`:

```
pip install ".[test]"
pytest
```

## Modules

- `nftmarket.dispatch`: call origins and errors.
  - `Origin.signed(account)` and `Origin.root()` create origins.
    `ensure_signed` and `ensure_root` raise `BadOrigin` when the origin is the
    wrong kind.
  - Every error derives from `PalletError`: `BadOrigin`,
    `InsufficientBalance`, `NFTError` and `MarketplaceError`. The last two
    carry a `kind` taken from `NFTErrorKind` or `MarketplaceErrorKind`.
  - `check_bounds` checks the length limits.
- `nftmarket.ledger`: `Balances` holds the free balance of each account and
  has an existential deposit. Its operations are `free_balance`,
  `set_balance`, `deposit`, `withdraw` and `transfer`. `withdraw` and
  `transfer` honour an `ExistenceRequirement`, either `KEEP_ALIVE` or
  `ALLOW_DEATH`. `Balances.transaction()` is a context manager. If an
  exception is raised inside it, every balance change made in it is undone.
- `nftmarket.nfts`: `NFTs` creates, transfers, burns and lends NFTs. It also
  finishes series and sets the mint fee, which only root may do.
  - Creating an NFT withdraws the mint fee. An NFT created without a series
    gets a new numeric series id such as `b"0"` or `b"1"` (see
    `u32_to_text`).
  - An NFT can be transferred only after its series is finished. It cannot be
    transferred, burned or lent while it is listed for sale, converted to a
    capsule or in transmission. A lent NFT cannot be transferred or burned.
  - The setters and queries `set_owner`, `owner`, `set_listed_for_sale`,
    `is_listed_for_sale` and the others are what other code uses to read and
    change NFT state.
  - Emitted events are appended to `NFTs.events`.
- `nftmarket.market_types`: the `MarketplaceType` (`PUBLIC` or `PRIVATE`),
  `MarketplaceInformation`, `SaleInformation` and `MarketplaceLimits` records,
  and the event classes the marketplace emits.
- `nftmarket.marketplace`: `Marketplace` creates marketplaces, charging
  `marketplace_mint_fee`, and manages their settings.
  - A private marketplace admits only the accounts on its allow list. A public
    one refuses the accounts on its disallow list.
  - It lists, unlists and buys NFTs. On a purchase the marketplace owner gets
    `price // (100 // commission_fee)`, and the seller gets the rest.
  - Listing without a marketplace id uses marketplace `0`. That marketplace
    exists only if it is passed in through the `marketplaces` argument.
  - Emitted events are appended to `Marketplace.events`.
- `nftmarket.weights`: `nft_weight(call)` and `marketplace_weight(call)` give
  the fixed cost estimate of each call. Each is a base weight plus storage
  reads and writes priced by a `DbWeight`. An unknown call name raises
  `ValueError`.

## Example

```python
from nftmarket.dispatch import Origin
from nftmarket.ledger import Balances
from nftmarket.nfts import NFTs
from nftmarket.marketplace import Marketplace
from nftmarket.market_types import MarketplaceLimits, MarketplaceType

ALICE, BOB, DAVE = 1, 2, 3

balances = Balances({ALICE: 1000, BOB: 1000, DAVE: 1000}, 0)
nfts = NFTs(balances, 1, 5, 10, None, (), ())
market = Marketplace(nfts, balances, MarketplaceLimits(), 250, (), (), None)

nft_id = nfts.create_nft(ALICE, b"\x32", b"\x32")
nfts.finish_series(Origin.signed(ALICE), b"\x32")

market.create(Origin.signed(DAVE), MarketplaceType.PUBLIC, 10, b"shop", None, None, None)
mkp_id = market.marketplace_id_generator

market.list(Origin.signed(ALICE), nft_id, 50, mkp_id)
market.buy(Origin.signed(BOB), nft_id)

assert nfts.owner(nft_id) == BOB
```

In this example DAVE receives a commission of 5 and ALICE receives 45.

## What it does not do

All state lives in memory in the objects you create. Nothing is saved to disk
and there is no command-line tool. There is no network interface either. The
weights are fixed estimates that you can look up. They are not charged
against any balance.