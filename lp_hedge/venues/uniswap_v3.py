"""
Uniswap V3 position source.

Reads every LP position NFT owned by an address from a
NonfungiblePositionManager, pinned to a single block, and simulates
decreaseLiquidity/collect with static calls to obtain withdrawable and
collectable token amounts.
"""

import logging
from typing import Dict, Optional

from web3 import Web3

from lp_hedge.core.errors import CollaboratorFailure
from lp_hedge.monitor.snapshot import AmmPositionRecord

logger = logging.getLogger(__name__)

MAX_UINT128 = 2**128 - 1
# Far-future deadline for simulated calls
SIM_DEADLINE = 2**64 - 1

POSITION_MANAGER_ABI = [
    {
        "name": "balanceOf", "type": "function", "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "tokenOfOwnerByIndex", "type": "function", "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}, {"name": "index", "type": "uint256"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "positions", "type": "function", "stateMutability": "view",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [
            {"name": "nonce", "type": "uint96"},
            {"name": "operator", "type": "address"},
            {"name": "token0", "type": "address"},
            {"name": "token1", "type": "address"},
            {"name": "fee", "type": "uint24"},
            {"name": "tickLower", "type": "int24"},
            {"name": "tickUpper", "type": "int24"},
            {"name": "liquidity", "type": "uint128"},
            {"name": "feeGrowthInside0LastX128", "type": "uint256"},
            {"name": "feeGrowthInside1LastX128", "type": "uint256"},
            {"name": "tokensOwed0", "type": "uint128"},
            {"name": "tokensOwed1", "type": "uint128"},
        ],
    },
    {
        "name": "decreaseLiquidity", "type": "function", "stateMutability": "payable",
        "inputs": [{
            "name": "params", "type": "tuple",
            "components": [
                {"name": "tokenId", "type": "uint256"},
                {"name": "liquidity", "type": "uint128"},
                {"name": "amount0Min", "type": "uint256"},
                {"name": "amount1Min", "type": "uint256"},
                {"name": "deadline", "type": "uint256"},
            ],
        }],
        "outputs": [{"name": "amount0", "type": "uint256"}, {"name": "amount1", "type": "uint256"}],
    },
    {
        "name": "collect", "type": "function", "stateMutability": "payable",
        "inputs": [{
            "name": "params", "type": "tuple",
            "components": [
                {"name": "tokenId", "type": "uint256"},
                {"name": "recipient", "type": "address"},
                {"name": "amount0Max", "type": "uint128"},
                {"name": "amount1Max", "type": "uint128"},
            ],
        }],
        "outputs": [{"name": "amount0", "type": "uint256"}, {"name": "amount1", "type": "uint256"}],
    },
]


class UniswapV3PositionSource:
    """
    AMM position source backed by a NonfungiblePositionManager contract.

    sync() replaces the position table atomically: on failure the previous
    table is kept untouched and CollaboratorFailure is raised.
    """

    def __init__(self, web3: Web3, position_manager_address: str):
        """
        Initialize position source.

        Args:
            web3: Connected Web3 instance
            position_manager_address: NonfungiblePositionManager address
        """
        self.web3 = web3
        self.contract = web3.eth.contract(
            address=Web3.to_checksum_address(position_manager_address),
            abi=POSITION_MANAGER_ABI,
        )
        self._positions: Dict[int, AmmPositionRecord] = {}
        self.synced_block: Optional[int] = None

    @classmethod
    def from_rpc(cls, rpc_url: str, position_manager_address: str) -> "UniswapV3PositionSource":
        return cls(Web3(Web3.HTTPProvider(rpc_url)), position_manager_address)

    def positions(self) -> Dict[int, AmmPositionRecord]:
        return dict(self._positions)

    def current_block(self) -> int:
        """Block the position table was read at (latest block before any sync)."""
        if self.synced_block is not None:
            return self.synced_block
        return self._latest_block()

    def _latest_block(self) -> int:
        try:
            return int(self.web3.eth.block_number)
        except Exception as e:
            raise CollaboratorFailure(f"Failed to get latest block: {e}") from e

    def sync(self, owner: str) -> None:
        """
        Refresh positions owned by owner.

        Steps per position:
        1. Read token0/token1/liquidity
        2. Simulate removing all liquidity -> withdrawable amounts
        3. Simulate collecting all fees -> collectable amounts
        """
        block = self._latest_block()
        fn = self.contract.functions
        positions: Dict[int, AmmPositionRecord] = {}

        try:
            owner = Web3.to_checksum_address(owner)
            balance = fn.balanceOf(owner).call(block_identifier=block)
            for index in range(balance):
                token_id = fn.tokenOfOwnerByIndex(owner, index).call(block_identifier=block)
                info = fn.positions(token_id).call(block_identifier=block)
                token0, token1, liquidity = info[2], info[3], info[7]

                withdrawable0 = withdrawable1 = 0
                if liquidity > 0:
                    withdrawable0, withdrawable1 = fn.decreaseLiquidity(
                        (token_id, liquidity, 0, 0, SIM_DEADLINE)
                    ).call({"from": owner}, block_identifier=block)

                collectable0, collectable1 = fn.collect(
                    (token_id, owner, MAX_UINT128, MAX_UINT128)
                ).call({"from": owner}, block_identifier=block)

                positions[token_id] = AmmPositionRecord(
                    token0=token0,
                    token1=token1,
                    liquidity=liquidity,
                    withdrawable0=withdrawable0,
                    withdrawable1=withdrawable1,
                    collectable0=collectable0,
                    collectable1=collectable1,
                )
        except Exception as e:
            raise CollaboratorFailure(f"Uniswap V3 position sync failed at block {block}: {e}") from e

        self._positions = positions
        self.synced_block = block
        logger.debug("Synced %d LP positions for %s at block %s", len(positions), owner, block)
