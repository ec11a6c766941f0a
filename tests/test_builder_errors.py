import pytest

from ordwallet.bitcoin import Address, InscriptionId, OutPoint, SatPoint
from ordwallet.builder_errors import (
    BuilderError,
    DuplicateAddress,
    DustError,
    NotEnoughCardinalUtxos,
    NotInWallet,
    OutOfRange,
    UtxoContainsAdditionalInscription,
    ValueOverflow,
)


def satpoint(n: int, offset: int) -> SatPoint:
    return SatPoint(OutPoint(f"{n:x}" * 64, n), offset)


def inscription_id(n: int) -> InscriptionId:
    return InscriptionId(f"{n:x}" * 64, n)


RECIPIENT = "tb1q6en7qjxgw4ev8xwx94pzdry6a6ky7wlfeqzunz"


def test_not_enough_cardinal_utxos_message():
    assert str(NotEnoughCardinalUtxos()) == (
        "wallet does not contain enough cardinal UTXOs, please add additional funds to wallet."
    )


def test_value_overflow_message():
    assert str(ValueOverflow()) == "arithmetic overflow calculating value"


def test_duplicate_address_message():
    address = Address.parse(RECIPIENT)
    assert str(DuplicateAddress(address)) == f"duplicate input address: {RECIPIENT}"


def test_not_in_wallet_message():
    point = satpoint(1, 0)
    assert str(NotInWallet(point)) == f"outgoing satpoint {point} not in wallet"


def test_out_of_range_message():
    point = satpoint(1, 4)
    error = OutOfRange(point, 3)
    assert str(error) == f"outgoing satpoint {point} offset higher than maximum 3"
    assert error.maximum == 3


def test_additional_inscription_message():
    outgoing = satpoint(1, 0)
    inscribed = satpoint(1, 500)
    error = UtxoContainsAdditionalInscription(outgoing, inscribed, inscription_id(1))
    assert str(error) == (
        f"cannot send {outgoing} without also sending inscription "
        f"{inscription_id(1)} at {inscribed}"
    )


def test_dust_message_uses_btc_amounts():
    error = DustError(output_value=1, dust_value=294)
    assert str(error) == "output value is below dust value: 0.00000001 BTC < 0.00000294 BTC"
    assert (error.output_value, error.dust_value) == (1, 294)


def test_equality_by_kind_and_values():
    assert DustError(1, 294) == DustError(1, 294)
    assert DustError(1, 294) != DustError(2, 294)
    assert NotEnoughCardinalUtxos() == NotEnoughCardinalUtxos()
    assert NotEnoughCardinalUtxos() != ValueOverflow()
    assert NotInWallet(satpoint(1, 0)) == NotInWallet(satpoint(1, 0))
    assert NotInWallet(satpoint(1, 0)) != NotInWallet(satpoint(2, 0))


def test_equal_errors_hash_equally():
    errors = {
        UtxoContainsAdditionalInscription(satpoint(1, 0), satpoint(1, 500), inscription_id(1)),
        UtxoContainsAdditionalInscription(satpoint(1, 0), satpoint(1, 500), inscription_id(1)),
    }
    assert len(errors) == 1


@pytest.mark.parametrize(
    "error",
    [
        NotEnoughCardinalUtxos(),
        ValueOverflow(),
        DustError(1, 294),
        NotInWallet(satpoint(1, 0)),
        OutOfRange(satpoint(1, 4), 3),
    ],
)
def test_errors_are_caught_as_builder_error(error):
    with pytest.raises(BuilderError) as caught:
        raise error
    assert caught.value == error