import pytest

from ordwallet.bitcoin import COIN_VALUE, Network, OutPoint, script_push_int
from ordwallet.chain_state import ChainState, TransactionTemplate, genesis_block


def test_mainnet_genesis_block():
    block = genesis_block(Network.BITCOIN)
    assert block.block_hash() == (
        "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
    )
    assert block.header.merkle_root == (
        "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
    )
    assert block.txdata[0].outputs[0].value == 50 * COIN_VALUE


def test_regtest_genesis_block():
    assert genesis_block(Network.REGTEST).block_hash() == (
        "0f9188f13cb7b2c71f2a335e3a4fc328bf5beb436012afca590b1a11466e2206"
    )


def test_genesis_merkle_root_is_coinbase_txid():
    block = genesis_block(Network.SIGNET)
    assert block.header.merkle_root == block.txdata[0].txid()


def test_new_state_holds_genesis_only():
    state = ChainState(Network.BITCOIN, 240000, False)
    assert state.hashes == [genesis_block(Network.BITCOIN).block_hash()]
    assert list(state.blocks) == state.hashes
    assert state.utxos == {}
    assert state.mempool == []


def test_push_block_chains_and_records_coinbase():
    state = ChainState()
    genesis_hash = state.hashes[0]
    block = state.push_block(50 * COIN_VALUE)
    assert block.header.prev_blockhash == genesis_hash
    assert block.header.time == 1
    assert block.header.nonce == 0
    assert state.nonce == 1
    assert state.hashes[-1] == block.block_hash()
    coinbase = block.txdata[0]
    assert coinbase.version == 0
    assert coinbase.inputs[0].previous_output.is_null()
    assert coinbase.inputs[0].script_sig == script_push_int(1)
    assert coinbase.outputs[0].value == 50 * COIN_VALUE
    assert state.utxos == {OutPoint(coinbase.txid(), 0): 50 * COIN_VALUE}
    assert state.transactions[coinbase.txid()] == coinbase


def test_second_block_links_to_first():
    state = ChainState()
    first = state.push_block(COIN_VALUE)
    second = state.push_block(COIN_VALUE)
    assert second.header.prev_blockhash == first.block_hash()
    assert second.header.nonce == 1
    assert first.block_hash() != second.block_hash()


def test_broadcast_and_mine_collects_fee():
    state = ChainState()
    state.push_block(50 * COIN_VALUE)
    coinbase_txid = state.blocks[state.hashes[1]].txdata[0].txid()
    txid = state.broadcast_tx(TransactionTemplate(fee=10, inputs=((1, 0, 0),), outputs=2))
    assert len(state.mempool) == 1
    tx = state.mempool[0]
    assert tx.txid() == txid
    assert tx.inputs[0].previous_output == OutPoint(coinbase_txid, 0)
    assert sum(out.value for out in tx.outputs) + 10 == 50 * COIN_VALUE
    assert tx.outputs[0].value == tx.outputs[1].value

    block = state.push_block(25 * COIN_VALUE)
    assert state.mempool == []
    assert block.txdata[1] == tx
    assert block.txdata[0].outputs[0].value == 25 * COIN_VALUE + 10
    assert OutPoint(coinbase_txid, 0) not in state.utxos
    assert OutPoint(txid, 0) in state.utxos
    assert OutPoint(txid, 1) in state.utxos


def test_broadcast_uses_output_values_and_witness():
    state = ChainState()
    state.push_block(50 * COIN_VALUE)
    state.broadcast_tx(
        TransactionTemplate(inputs=((1, 0, 0),), outputs=1, output_values=(123,), witness=(b"\x01",))
    )
    tx = state.mempool[0]
    assert tx.outputs[0].value == 123
    assert tx.inputs[0].witness == [b"\x01"]


def test_broadcast_uneven_split_raises():
    state = ChainState()
    state.push_block(50 * COIN_VALUE)
    with pytest.raises(ValueError):
        state.broadcast_tx(TransactionTemplate(fee=1, inputs=((1, 0, 0),), outputs=2))
    assert state.mempool == []


def test_pop_block_returns_tip():
    state = ChainState()
    block = state.push_block(COIN_VALUE)
    tip = block.block_hash()
    assert state.pop_block() == tip
    assert tip not in state.blocks
    assert len(state.hashes) == 1


def test_get_confirmations():
    state = ChainState()
    first = state.push_block(COIN_VALUE)
    state.push_block(COIN_VALUE)
    assert state.get_confirmations(first.txdata[0]) == 2
    assert state.get_confirmations(state.blocks[state.hashes[2]].txdata[0]) == 1


def test_get_confirmations_unknown_tx():
    state = ChainState()
    state.push_block(COIN_VALUE)
    state.broadcast_tx(TransactionTemplate(inputs=((1, 0, 0),)))
    assert state.get_confirmations(state.mempool[0]) == 0