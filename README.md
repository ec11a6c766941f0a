# ordwallet

Bitcoin data types with wire-format serialisation, the error types used when
building ordinal-aware transactions, an in-memory chain state for tests, and a
few small presentation helpers. It needs nothing outside the standard library.

## Modules

- `ordwallet.bitcoin`: `Network`, `OutPoint`, `SatPoint`, `InscriptionId`,
  `Address`, `TxIn`, `TxOut`, `Transaction`, `BlockHeader`, `Block` and
  `FeeRate`, plus `dust_value`, `script_push_int`, `sha256d` and
  `COIN_VALUE`.
  - `Address.parse` reads bech32/bech32m segwit addresses and base58check
    P2PKH/P2SH addresses. `Address.p2tr` makes a taproot address from a
    32-byte output key.
  - `Transaction.serialize` and `Transaction.deserialize` use the consensus
    wire format, segwit included. A transaction also reports `txid()`,
    `size()`, `weight()`, `vsize()` and `is_explicitly_rbf()`.
  - `FeeRate(sat_per_vbyte).fee(vbytes)` rounds up to a whole sat.
- `ordwallet.builder_errors`: `BuilderError` and its subclasses
  `DuplicateAddress`, `DustError`, `NotEnoughCardinalUtxos`, `NotInWallet`,
  `OutOfRange`, `UtxoContainsAdditionalInscription` and `ValueOverflow`.
  Two errors compare equal when they are of the same kind and carry the same
  values.
- `ordwallet.chain_state`: `genesis_block(network)`, `ChainState`,
  `TransactionTemplate` and `Sent`. `ChainState` keeps blocks, a mempool,
  unspent outputs and wallet bookkeeping in memory.
- `ordwallet.clock`: `Clock.from_height(height)` gives the hour, minute and
  second hand angles, in degrees, for a block height.
- `ordwallet.iframe`: `Iframe.thumbnail(id)` and `Iframe.main(id)` render
  sandboxed preview iframes as HTML with `str()`.
- `ordwallet.tally`: `tally("input", 2)` gives `"2 inputs"`.

## Examples

```python
from ordwallet.bitcoin import Address, FeeRate, Transaction

address = Address.parse("tb1q6en7qjxgw4ev8xwx94pzdry6a6ky7wlfeqzunz")
print(address.script_pubkey().hex())

fee = FeeRate(1.5).fee(141)   # 212 sats
```

```python
from ordwallet.bitcoin import COIN_VALUE, Network
from ordwallet.chain_state import ChainState, TransactionTemplate

state = ChainState(Network.REGTEST)
state.push_block(50 * COIN_VALUE)           # block 1
txid = state.broadcast_tx(TransactionTemplate(inputs=((1, 0, 0),), outputs=2))
block = state.push_block(50 * COIN_VALUE)   # mines the mempool
print(txid, state.get_confirmations(block.txdata[1]))   # confirmations: 1
```

`broadcast_tx` raises `ValueError` when the input value minus the fee does not
split evenly across the outputs. `pop_block` removes the chain tip and returns
its hash.

## What this package does not do

- It does not build transactions. The `ordwallet.builder_errors` exceptions
  describe how such a build can fail, but no class here selects inputs, aligns
  sats or deducts fees.
- It does not serve anything. `ChainState` is plain in-memory data. There is
  no JSON-RPC or HTTP server in front of it and no network access.
- It does not generate or manage keys, sign transactions or store wallets on
  disk.

## Tests

```
pip install -e .[test]
pytest
```