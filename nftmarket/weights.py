"""Benchmarked weights of the NFT and marketplace calls."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["DbWeight", "nft_weight", "marketplace_weight"]

_MAX_WEIGHT = 2**64 - 1


def _saturating(value: int) -> int:
    return min(value, _MAX_WEIGHT)


@dataclass(frozen=True)
class DbWeight:
    """Cost of one storage read and one storage write."""

    read: int = 25_000_000
    write: int = 100_000_000

    def reads(self, count: int) -> int:
        """Weight of ``count`` storage reads."""
        return _saturating(self.read * count)

    def writes(self, count: int) -> int:
        """Weight of ``count`` storage writes."""
        return _saturating(self.write * count)


# call name -> (base weight, storage reads, storage writes)
_NFT_WEIGHTS: dict[str, tuple[int, int, int]] = {
    "create": (78_531_000, 5, 5),
    "transfer": (34_711_000, 3, 1),
    "burn": (29_880_000, 2, 1),
    "finish_series": (24_500_000, 1, 1),
    "set_nft_mint_fee": (17_980_000, 0, 1),
    "lend": (14_760_000, 1, 1),
}

_MARKETPLACE_WEIGHTS: dict[str, tuple[int, int, int]] = {
    "list": (51_580_000, 4, 2),
    "unlist": (34_760_000, 2, 2),
    "buy": (43_881_000, 3, 2),
    "create": (66_831_000, 3, 3),
    "add_account_to_allow_list": (27_150_000, 1, 1),
    "remove_account_from_allow_list": (25_770_000, 1, 1),
    "set_owner": (26_170_000, 1, 1),
    "set_market_type": (25_990_000, 1, 1),
    "set_name": (26_481_000, 1, 1),
    "set_marketplace_mint_fee": (19_041_000, 0, 1),
    "set_commission_fee": (25_770_000, 1, 1),
    "set_uri": (26_270_000, 1, 1),
    "set_logo_uri": (26_501_000, 1, 1),
    "add_account_to_disallow_list": (26_810_000, 1, 1),
    "remove_account_from_disallow_list": (25_470_000, 1, 1),
}
# The description setter is charged the logo uri weight.
_MARKETPLACE_WEIGHTS["set_description"] = _MARKETPLACE_WEIGHTS["set_logo_uri"]


def _weight(table: dict[str, tuple[int, int, int]], call: str, db: DbWeight | None) -> int:
    try:
        base, reads, writes = table[call]
    except KeyError:
        raise ValueError(f"unknown call: {call!r}") from None
    db = db or DbWeight()
    return _saturating(_saturating(base + db.reads(reads)) + db.writes(writes))


def nft_weight(call: str, db: DbWeight | None = None) -> int:
    """Weight of the NFT call named ``call``."""
    return _weight(_NFT_WEIGHTS, call, db)


def marketplace_weight(call: str, db: DbWeight | None = None) -> int:
    """Weight of the marketplace call named ``call``."""
    return _weight(_MARKETPLACE_WEIGHTS, call, db)