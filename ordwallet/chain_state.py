"""In-memory chain, mempool and wallet state for a mock Bitcoin node."""

from __future__ import annotations

from dataclasses import dataclass, field

from ordwallet.bitcoin import (
    COIN_VALUE,
    SEQUENCE_MAX,
    Address,
    Block,
    BlockHeader,
    Network,
    OutPoint,
    Transaction,
    TxIn,
    TxOut,
    script_push_int,
)

_ZERO_HASH = "0" * 64

_GENESIS_HEADLINE = b"The Times 03/Jan/2009 Chancellor on brink of second bailout for banks"
_GENESIS_PUBKEY = bytes.fromhex(
    "04678afdb0fe5548271967f1a67130b7105cd6a828e03909a67962e0ea1f61deb6"
    "49f6bc3f4cef38c4f35504e51ec112de5c384df7ba0b8d578a4c702b6bf11d5f"
)

_GENESIS_PARAMS = {
    Network.BITCOIN: (1231006505, 0x1D00FFFF, 2083236893),
    Network.TESTNET: (1296688602, 0x1D00FFFF, 414098458),
    Network.SIGNET: (1598918400, 0x1E0377AE, 52613770),
    Network.REGTEST: (1296688602, 0x207FFFFF, 2),
}


def genesis_block(network: Network) -> Block:
    """The genesis block of ``network``."""
    script_sig = (
        b"\x04\xff\xff\x00\x1d\x01\x04" + bytes([len(_GENESIS_HEADLINE)]) + _GENESIS_HEADLINE
    )
    coinbase = Transaction(
        version=1,
        lock_time=0,
        inputs=[TxIn(OutPoint.null(), script_sig, SEQUENCE_MAX, [])],
        outputs=[
            TxOut(50 * COIN_VALUE, bytes([len(_GENESIS_PUBKEY)]) + _GENESIS_PUBKEY + b"\xac")
        ],
    )
    time, bits, nonce = _GENESIS_PARAMS[network]
    header = BlockHeader(
        version=1,
        prev_blockhash=_ZERO_HASH,
        merkle_root=coinbase.txid(),
        time=time,
        bits=bits,
        nonce=nonce,
    )
    return Block(header, [coinbase])


@dataclass(frozen=True)
class TransactionTemplate:
    """Shape of a transaction to broadcast.

    ``inputs`` holds (block height, transaction index, output index) triples.
    """

    fee: int = 0
    inputs: tuple[tuple[int, int, int], ...] = ()
    output_values: tuple[int, ...] = ()
    outputs: int = 1
    witness: tuple[bytes, ...] = ()


@dataclass
class Sent:
    """A record of a send-to-address request."""

    amount: float
    address: Address
    locked: list[OutPoint]


@dataclass
class ChainState:
    """Blocks, transactions, unspent outputs and wallets known to the node."""

    network: Network = Network.BITCOIN
    version: int = 240000
    fail_lock_unspent: bool = False
    blocks: dict[str, Block] = field(init=False)
    hashes: list[str] = field(init=False)
    descriptors: list[str] = field(init=False, default_factory=list)
    loaded_wallets: set[str] = field(init=False, default_factory=set)
    locked: set[OutPoint] = field(init=False, default_factory=set)
    mempool: list[Transaction] = field(init=False, default_factory=list)
    nonce: int = field(init=False, default=0)
    sent: list[Sent] = field(init=False, default_factory=list)
    transactions: dict[str, Transaction] = field(init=False, default_factory=dict)
    utxos: dict[OutPoint, int] = field(init=False, default_factory=dict)
    wallets: set[str] = field(init=False, default_factory=set)

    def __post_init__(self) -> None:
        genesis = genesis_block(self.network)
        genesis_hash = genesis.block_hash()
        self.blocks = {genesis_hash: genesis}
        self.hashes = [genesis_hash]

    def push_block(self, subsidy: int) -> Block:
        """Mine a block holding a coinbase and every mempool transaction."""
        fees = 0
        for tx in self.mempool:
            input_value = sum(
                self.transactions[txin.previous_output.txid].outputs[txin.previous_output.vout].value
                for txin in tx.inputs
            )
            output_value = sum(txout.value for txout in tx.outputs)
            if output_value > input_value:
                raise ValueError(f"transaction {tx.txid()} spends more than its inputs")
            fees += input_value - output_value
            self.transactions[tx.txid()] = tx

        coinbase = Transaction(
            version=0,
            lock_time=0,
            inputs=[TxIn(OutPoint.null(), script_push_int(len(self.blocks)), SEQUENCE_MAX, [])],
            outputs=[TxOut(subsidy + fees, b"")],
        )
        self.transactions[coinbase.txid()] = coinbase

        block = Block(
            BlockHeader(
                version=0,
                prev_blockhash=self.hashes[-1],
                merkle_root=_ZERO_HASH,
                time=len(self.blocks),
                bits=0,
                nonce=self.nonce,
            ),
            [coinbase, *self.mempool],
        )
        self.mempool = []

        for tx in block.txdata:
            for txin in tx.inputs:
                self.utxos.pop(txin.previous_output, None)
            txid = tx.txid()
            for vout, txout in enumerate(tx.outputs):
                self.utxos[OutPoint(txid, vout)] = txout.value

        block_hash = block.block_hash()
        self.blocks[block_hash] = block
        self.hashes.append(block_hash)
        self.nonce += 1
        return block

    def pop_block(self) -> str:
        """Remove the chain tip and return its hash."""
        if not self.hashes:
            raise IndexError("no blocks to pop")
        block_hash = self.hashes.pop()
        self.blocks.pop(block_hash, None)
        return block_hash

    def broadcast_tx(self, template: TransactionTemplate) -> str:
        """Add a transaction built from ``template`` to the mempool and return its txid."""
        total_value = 0
        inputs = []
        for height, tx_index, vout in template.inputs:
            tx = self.blocks[self.hashes[height]].txdata[tx_index]
            total_value += tx.outputs[vout].value
            inputs.append(
                TxIn(OutPoint(tx.txid(), vout), b"", SEQUENCE_MAX, list(template.witness))
            )

        if template.outputs <= 0:
            raise ValueError("a transaction template needs at least one output")
        if template.fee > total_value:
            raise ValueError(f"fee {template.fee} exceeds input value {total_value}")
        value_per_output = (total_value - template.fee) // template.outputs
        if value_per_output * template.outputs + template.fee != total_value:
            raise ValueError(
                f"input value {total_value} minus fee {template.fee} "
                f"does not split evenly into {template.outputs} outputs"
            )

        tx = Transaction(
            version=0,
            lock_time=0,
            inputs=inputs,
            outputs=[
                TxOut(
                    template.output_values[i] if i < len(template.output_values) else value_per_output,
                    b"",
                )
                for i in range(template.outputs)
            ],
        )
        self.mempool.append(tx)
        return tx.txid()

    def get_confirmations(self, tx: Transaction) -> int:
        """Number of blocks from the tip down to the one holding ``tx``, or 0."""
        for confirmations, block_hash in enumerate(reversed(self.hashes), start=1):
            if tx in self.blocks[block_hash].txdata:
                return confirmations
        return 0