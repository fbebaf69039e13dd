import pytest

from nftmarket.dispatch import BadOrigin, InsufficientBalance, NFTError, NFTErrorKind, Origin
from nftmarket.ledger import Balances
from nftmarket.nfts import NFTData, NFTLent, NFTs, SeriesDetails, u32_to_text

ALICE = 1
BOB = 2
CHAD = 3
COLLECTOR = 99
NFT_MINT_FEE = 10
INVALID_NFT_ID = 1001


def build(balances=(), **kwargs):
    ledger = Balances(list(balances), existential_deposit=1)
    kwargs.setdefault("nft_mint_fee", NFT_MINT_FEE)
    pallet = NFTs(ledger, min_ipfs_len=1, max_ipfs_len=5, **kwargs)
    return pallet, ledger


def signed(account):
    return Origin.signed(account)


def assert_noop(pallet, ledger, call, kind):
    before_data = dict(pallet._data)
    before_balances = {a: ledger.free_balance(a) for a in (ALICE, BOB, CHAD)}
    with pytest.raises(NFTError) as info:
        call()
    assert info.value.kind is kind
    assert dict(pallet._data) == before_data
    assert {a: ledger.free_balance(a) for a in (ALICE, BOB, CHAD)} == before_balances


def test_u32_to_text():
    assert u32_to_text(0) == b"0"
    assert u32_to_text(4294967295) == b"4294967295"
    with pytest.raises(OverflowError):
        u32_to_text(2**32)


def test_cannot_transfer_lent_nfts():
    pallet, ledger = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    pallet.set_viewer(nft_id, BOB)
    assert_noop(pallet, ledger, lambda: pallet.transfer(signed(ALICE), nft_id, BOB),
                NFTErrorKind.CannotTransferLentNFTs)


def test_cannot_burn_lent_nfts():
    pallet, ledger = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    pallet.set_viewer(nft_id, BOB)
    assert_noop(pallet, ledger, lambda: pallet.burn(signed(ALICE), nft_id),
                NFTErrorKind.CannotBurnLentNFTs)


def test_lend():
    pallet, _ = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    nft = pallet.data(nft_id)
    pallet.lend(signed(ALICE), nft_id, BOB)
    nft.viewer = BOB
    assert pallet.data(nft_id) == nft
    assert pallet.events[-1] == NFTLent(nft_id, BOB)


def test_lend_nft_not_found():
    pallet, ledger = build()
    assert_noop(pallet, ledger, lambda: pallet.lend(signed(ALICE), INVALID_NFT_ID, None),
                NFTErrorKind.NFTNotFound)


def test_lend_not_the_nft_owner():
    pallet, ledger = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    assert_noop(pallet, ledger, lambda: pallet.lend(signed(BOB), nft_id, None),
                NFTErrorKind.NotTheNFTOwner)


@pytest.mark.parametrize(
    "setter, kind",
    [
        ("set_listed_for_sale", NFTErrorKind.CannotLendNFTsListedForSale),
        ("set_converted_to_capsule", NFTErrorKind.CannotLendCapsules),
        ("set_in_transmission", NFTErrorKind.CannotLendNFTsInTransmission),
    ],
)
def test_cannot_lend_flagged_nfts(setter, kind):
    pallet, ledger = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    getattr(pallet, setter)(nft_id, True)
    assert_noop(pallet, ledger, lambda: pallet.lend(signed(ALICE), nft_id, None), kind)


def test_create_happy():
    pallet, ledger = build([(ALICE, 1000), (BOB, 1), (CHAD, 100)])
    assert pallet.nft_id_generator == 0
    assert pallet.series_id_generator == 0

    series = SeriesDetails(ALICE, True)
    data = NFTData(ALICE, bytes([1]), bytes([50]))
    alice_balance = ledger.free_balance(ALICE)

    pallet.create(signed(ALICE), data.ipfs_reference, data.series_id)
    assert pallet.nft_id_generator == 1
    assert pallet.series(data.series_id) == series
    assert pallet.data(0) == data
    assert pallet.series_id_generator == 0
    assert ledger.free_balance(ALICE) == alice_balance - pallet.nft_mint_fee

    data = NFTData(ALICE, bytes([0]), bytes([48]))
    pallet.create(signed(ALICE), bytes([0]), None)
    assert pallet.series(data.series_id) == SeriesDetails(ALICE, True)
    assert pallet.data(1) == data
    assert pallet.series_id_generator == 1


def test_create_skips_taken_series_ids():
    pallet, _ = build([(ALICE, 1000)])
    pallet.create(signed(ALICE), b"\x01", b"0")
    pallet.create(signed(ALICE), b"\x01", None)
    assert pallet.data(1).series_id == b"1"
    assert pallet.series_id_generator == 2


def test_create_unhappy():
    pallet, ledger = build([(ALICE, 1), (BOB, 100), (CHAD, 100)])
    assert pallet.nft_id_generator == 0
    assert pallet.series_id_generator == 0

    assert_noop(pallet, ledger, lambda: pallet.create(signed(ALICE), b"", None),
                NFTErrorKind.IPFSReferenceIsTooShort)
    assert_noop(pallet, ledger, lambda: pallet.create(signed(ALICE), bytes([1, 2, 3, 4, 5, 6]), None),
                NFTErrorKind.IPFSReferenceIsTooLong)

    with pytest.raises(InsufficientBalance):
        pallet.create(signed(ALICE), bytes([1]), None)
    assert ledger.free_balance(ALICE) == 1
    assert pallet.nft_id_generator == 0

    series_id = bytes([50])
    pallet.create_nft(CHAD, bytes([50]), series_id)
    assert_noop(pallet, ledger, lambda: pallet.create(signed(BOB), bytes([1]), series_id),
                NFTErrorKind.NotTheSeriesOwner)
    assert ledger.free_balance(BOB) == 100

    series_id = bytes([51])
    pallet.create_nft(BOB, bytes([50]), series_id)
    pallet.finish_series(signed(BOB), series_id)
    assert_noop(pallet, ledger, lambda: pallet.create(signed(BOB), bytes([1]), series_id),
                NFTErrorKind.CannotCreateNFTsWithCompletedSeries)


def test_create_pays_fees_collector():
    ledger = Balances([(ALICE, 1000)], existential_deposit=1)
    pallet = NFTs(ledger, 1, 5, NFT_MINT_FEE, lambda amount: ledger.deposit(COLLECTOR, amount))
    pallet.create(signed(ALICE), b"\x01", None)
    assert ledger.free_balance(COLLECTOR) == NFT_MINT_FEE
    assert ledger.free_balance(ALICE) == 990


def test_transfer_happy():
    pallet, _ = build([(ALICE, 1000)])
    series_id = bytes([2])
    nft_id = pallet.create_nft(ALICE, bytes([1]), series_id)
    pallet.finish_series(signed(ALICE), series_id)
    nft = pallet.data(nft_id)
    assert (nft.owner, nft.creator) == (ALICE, ALICE)

    pallet.transfer(signed(ALICE), nft_id, BOB)
    nft = pallet.data(nft_id)
    assert (nft.owner, nft.creator) == (BOB, ALICE)


def test_transfer_unhappy():
    pallet, ledger = build([(ALICE, 100), (BOB, 100)])
    alice = signed(ALICE)

    assert_noop(pallet, ledger, lambda: pallet.transfer(alice, 1001, BOB), NFTErrorKind.NFTNotFound)

    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    assert_noop(pallet, ledger, lambda: pallet.transfer(alice, nft_id, BOB),
                NFTErrorKind.CannotTransferNFTsInUncompletedSeries)

    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    pallet.set_listed_for_sale(nft_id, True)
    assert_noop(pallet, ledger, lambda: pallet.transfer(alice, nft_id, BOB),
                NFTErrorKind.CannotTransferNFTsListedForSale)

    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    pallet.set_converted_to_capsule(nft_id, True)
    assert_noop(pallet, ledger, lambda: pallet.transfer(alice, nft_id, BOB),
                NFTErrorKind.CannotTransferCapsules)

    nft_id = pallet.create_nft(ALICE, b"\x00", None)
    pallet.set_in_transmission(nft_id, True)
    assert_noop(pallet, ledger, lambda: pallet.transfer(alice, nft_id, BOB),
                NFTErrorKind.CannotTransferNFTsInTransmission)


def test_burn_happy():
    pallet, _ = build([(ALICE, 1000)])
    nft_id = pallet.create_nft(ALICE, bytes([1]), bytes([2]))
    assert pallet.data(nft_id) is not None and pallet.data(nft_id).owner == ALICE
    pallet.burn(signed(ALICE), nft_id)
    assert pallet.data(nft_id) is None


def test_burn_unhappy():
    pallet, ledger = build([(ALICE, 100), (BOB, 100)])
    alice = signed(ALICE)

    assert_noop(pallet, ledger, lambda: pallet.burn(alice, 10001), NFTErrorKind.NFTNotFound)

    nft_id = pallet.create_nft(BOB, bytes([1]), bytes([3]))
    assert_noop(pallet, ledger, lambda: pallet.burn(alice, nft_id), NFTErrorKind.NotTheNFTOwner)

    nft_id = pallet.create_nft(ALICE, bytes([1]), bytes([2]))
    pallet.set_listed_for_sale(nft_id, True)
    assert_noop(pallet, ledger, lambda: pallet.burn(alice, nft_id),
                NFTErrorKind.CannotBurnNFTsListedForSale)

    nft_id = pallet.create_nft(ALICE, bytes([1]), bytes([2]))
    pallet.set_converted_to_capsule(nft_id, True)
    assert_noop(pallet, ledger, lambda: pallet.burn(alice, nft_id), NFTErrorKind.CannotBurnCapsules)


def test_finish_series_happy():
    pallet, _ = build([(ALICE, 1000)])
    series_id = bytes([50])
    pallet.create_nft(ALICE, bytes([1]), series_id)
    assert pallet.series(series_id).draft is True
    pallet.finish_series(signed(ALICE), series_id)
    assert pallet.series(series_id).draft is False


def test_finish_series_unhappy():
    pallet, ledger = build([(ALICE, 100), (BOB, 100)])
    assert_noop(pallet, ledger, lambda: pallet.finish_series(signed(ALICE), bytes([123])),
                NFTErrorKind.SeriesNotFound)
    series_id = bytes([3])
    pallet.create_nft(BOB, bytes([1]), series_id)
    assert_noop(pallet, ledger, lambda: pallet.finish_series(signed(ALICE), series_id),
                NFTErrorKind.NotTheSeriesOwner)
    assert pallet.series(series_id).draft is True


def test_set_nft_mint_fee_happy():
    pallet, _ = build()
    assert pallet.nft_mint_fee == NFT_MINT_FEE
    pallet.set_nft_mint_fee(Origin.root(), 654)
    assert pallet.nft_mint_fee == 654


def test_set_nft_mint_fee_unhappy():
    pallet, _ = build([(ALICE, 10000)])
    with pytest.raises(BadOrigin):
        pallet.set_nft_mint_fee(signed(ALICE), 654)
    assert pallet.nft_mint_fee == NFT_MINT_FEE


def test_genesis_register_nfts():
    data = NFTData(ALICE, bytes([1]), bytes([48]))
    pallet, _ = build(nft_mint_fee=10, nfts=[(100, data)])
    assert pallet.nft_id_generator == 101
    assert pallet.series_id_generator == 0
    assert pallet.data(100) == data
    assert pallet.nft_mint_fee == 10


def test_set_owner_happy():
    pallet, _ = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, bytes([1]), None)
    pallet.set_owner(nft_id, BOB)
    assert pallet.data(nft_id).owner == BOB


def test_set_owner_unhappy():
    pallet, ledger = build([(ALICE, 100)])
    assert_noop(pallet, ledger, lambda: pallet.set_owner(1000, BOB), NFTErrorKind.NFTNotFound)


def test_owner():
    pallet, _ = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, bytes([1]), None)
    assert pallet.owner(nft_id) == ALICE
    assert pallet.owner(1000) is None


def test_is_series_completed():
    pallet, _ = build([(ALICE, 100)])
    series_id = bytes([50])
    nft_id = pallet.create_nft(ALICE, bytes([1]), series_id)
    assert pallet.is_nft_in_completed_series(nft_id) is False
    pallet.finish_series(signed(ALICE), series_id)
    assert pallet.is_nft_in_completed_series(nft_id) is True
    assert pallet.is_nft_in_completed_series(1001) is None


def test_flag_queries_and_series_completion():
    pallet, _ = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, bytes([1]), bytes([7]))
    assert pallet.is_listed_for_sale(nft_id) is False
    assert pallet.is_in_transmission(1001) is None
    pallet.set_in_transmission(nft_id, True)
    assert pallet.is_in_transmission(nft_id) is True
    pallet.set_converted_to_capsule(nft_id, True)
    assert pallet.is_converted_to_capsule(nft_id) is True
    pallet.set_series_completion(bytes([7]), True)
    assert pallet.series(bytes([7])).draft is False
    pallet.set_series_completion(bytes([7]), False)
    assert pallet.series(bytes([7])).draft is True
    pallet.lock_series(bytes([7]))
    assert pallet.get_nft(nft_id).series_id == bytes([7])
    assert pallet.series(bytes([7])).draft is False
    with pytest.raises(NFTError) as info:
        pallet.set_series_completion(bytes([8]), True)
    assert info.value.kind is NFTErrorKind.SeriesNotFound


def test_data_returns_copy():
    pallet, _ = build([(ALICE, 100)])
    nft_id = pallet.create_nft(ALICE, bytes([1]), None)
    copy = pallet.data(nft_id)
    copy.owner = BOB
    assert pallet.owner(nft_id) == ALICE