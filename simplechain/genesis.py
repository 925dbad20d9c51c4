from simplechain.block import Block, GENESIS_BODY


def generate(blockchain):
    """Append the genesis block when the chain is empty."""
    if blockchain.height() >= 0:
        return None

    print("Adding genesis block")
    return blockchain.add_block(Block(GENESIS_BODY))
