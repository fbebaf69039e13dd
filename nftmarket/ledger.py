"""An in-memory currency ledger holding the free balance of every account."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Hashable

from nftmarket.dispatch import InsufficientBalance, PalletError

__all__ = ["ExistenceRequirement", "Balances"]


class ExistenceRequirement(enum.Enum):
    """Whether an operation may drop an account below the existential deposit."""

    KEEP_ALIVE = "keep_alive"
    ALLOW_DEATH = "allow_death"


class Balances:
    """Free balances of accounts, with an existential deposit.

    An account whose balance falls below the existential deposit is reaped:
    its remaining dust is lost and its balance reads as zero.
    """

    def __init__(
        self,
        endowed: Mapping[Hashable, int] | Iterable[tuple[Hashable, int]] | None = None,
        existential_deposit: int = 0,
    ) -> None:
        if existential_deposit < 0:
            raise ValueError("existential deposit cannot be negative")
        self.existential_deposit = existential_deposit
        self._free: dict[Hashable, int] = {}
        pairs = endowed.items() if isinstance(endowed, Mapping) else (endowed or ())
        for account, amount in pairs:
            self.set_balance(account, amount)

    def free_balance(self, account: Hashable) -> int:
        """The free balance of ``account``; zero for unknown accounts."""
        return self._free.get(account, 0)

    def _store(self, account: Hashable, amount: int) -> None:
        if amount <= 0 or amount < self.existential_deposit:
            self._free.pop(account, None)
        else:
            self._free[account] = amount

    @staticmethod
    def _check_amount(amount: int) -> None:
        if amount < 0:
            raise ValueError("amount cannot be negative")

    def set_balance(self, account: Hashable, amount: int) -> None:
        """Force the free balance of ``account`` to ``amount``."""
        self._check_amount(amount)
        self._store(account, amount)

    def deposit(self, account: Hashable, amount: int) -> int:
        """Credit ``account``, creating it if needed; return what was credited.

        Nothing is credited when the resulting balance would stay below the
        existential deposit.
        """
        self._check_amount(amount)
        new_balance = self.free_balance(account) + amount
        if amount == 0 or new_balance < self.existential_deposit:
            return 0
        self._free[account] = new_balance
        return amount

    def _debited(self, account: Hashable, amount: int, existence: ExistenceRequirement) -> int:
        new_balance = self.free_balance(account) - amount
        if new_balance < 0:
            raise InsufficientBalance()
        if (
            existence is ExistenceRequirement.KEEP_ALIVE
            and new_balance < self.existential_deposit
            and self.free_balance(account) > 0
        ):
            raise PalletError("KeepAlive")
        return new_balance

    def withdraw(
        self,
        account: Hashable,
        amount: int,
        existence: ExistenceRequirement = ExistenceRequirement.KEEP_ALIVE,
    ) -> int:
        """Debit ``amount`` from ``account`` and return the amount taken."""
        self._check_amount(amount)
        if amount == 0:
            return 0
        self._store(account, self._debited(account, amount, existence))
        return amount

    def transfer(
        self,
        source: Hashable,
        dest: Hashable,
        amount: int,
        existence: ExistenceRequirement = ExistenceRequirement.KEEP_ALIVE,
    ) -> None:
        """Move ``amount`` from ``source`` to ``dest``."""
        self._check_amount(amount)
        if amount == 0 or source == dest:
            return
        source_balance = self._debited(source, amount, existence)
        dest_balance = self.free_balance(dest) + amount
        if dest_balance < self.existential_deposit:
            raise PalletError("ExistentialDeposit")
        self._store(source, source_balance)
        self._free[dest] = dest_balance

    @contextmanager
    def transaction(self) -> Iterator["Balances"]:
        """Undo every balance change made inside the block if it raises."""
        snapshot = dict(self._free)
        try:
            yield self
        except BaseException:
            self._free = snapshot
            raise