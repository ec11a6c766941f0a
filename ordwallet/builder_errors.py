"""Errors raised while building ordinal-aware transactions."""

from __future__ import annotations

from ordwallet.bitcoin import COIN_VALUE, Address, InscriptionId, SatPoint


def _format_amount(sats: int) -> str:
    whole, fraction = divmod(sats, COIN_VALUE)
    return f"{whole}.{fraction:08d} BTC"


class BuilderError(Exception):
    """Base class for transaction construction failures.

    Two errors are equal when they are of the same kind and carry the same values.
    """

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BuilderError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))

    def __repr__(self) -> str:
        values = ", ".join(repr(arg) for arg in self.args)
        return f"{type(self).__name__}({values})"


class DuplicateAddress(BuilderError):
    """The recipient or a change address was given more than once."""

    def __init__(self, address: Address) -> None:
        super().__init__(address)
        self.address = address

    def __str__(self) -> str:
        return f"duplicate input address: {self.address}"


class DustError(BuilderError):
    """The requested output value is below the recipient's dust limit."""

    def __init__(self, output_value: int, dust_value: int) -> None:
        super().__init__(output_value, dust_value)
        self.output_value = output_value
        self.dust_value = dust_value

    def __str__(self) -> str:
        return (
            "output value is below dust value: "
            f"{_format_amount(self.output_value)} < {_format_amount(self.dust_value)}"
        )


class NotEnoughCardinalUtxos(BuilderError):
    """The wallet has no uninscribed output large enough to cover what is needed."""

    def __init__(self) -> None:
        super().__init__()

    def __str__(self) -> str:
        return (
            "wallet does not contain enough cardinal UTXOs, "
            "please add additional funds to wallet."
        )


class NotInWallet(BuilderError):
    """The outgoing satpoint's output is not among the wallet's outputs."""

    def __init__(self, outgoing_satpoint: SatPoint) -> None:
        super().__init__(outgoing_satpoint)
        self.outgoing_satpoint = outgoing_satpoint

    def __str__(self) -> str:
        return f"outgoing satpoint {self.outgoing_satpoint} not in wallet"


class OutOfRange(BuilderError):
    """The outgoing satpoint's offset lies beyond the end of its output."""

    def __init__(self, outgoing_satpoint: SatPoint, maximum: int) -> None:
        super().__init__(outgoing_satpoint, maximum)
        self.outgoing_satpoint = outgoing_satpoint
        self.maximum = maximum

    def __str__(self) -> str:
        return (
            f"outgoing satpoint {self.outgoing_satpoint} "
            f"offset higher than maximum {self.maximum}"
        )


class UtxoContainsAdditionalInscription(BuilderError):
    """Sending the outgoing sat would also send another inscription."""

    def __init__(
        self,
        outgoing_satpoint: SatPoint,
        inscribed_satpoint: SatPoint,
        inscription_id: InscriptionId,
    ) -> None:
        super().__init__(outgoing_satpoint, inscribed_satpoint, inscription_id)
        self.outgoing_satpoint = outgoing_satpoint
        self.inscribed_satpoint = inscribed_satpoint
        self.inscription_id = inscription_id

    def __str__(self) -> str:
        return (
            f"cannot send {self.outgoing_satpoint} without also sending "
            f"inscription {self.inscription_id} at {self.inscribed_satpoint}"
        )


class ValueOverflow(BuilderError):
    """An amount calculation exceeded the representable range."""

    def __init__(self) -> None:
        super().__init__()

    def __str__(self) -> str:
        return "arithmetic overflow calculating value"