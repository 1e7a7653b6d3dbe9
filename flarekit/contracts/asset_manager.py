"""
FAssets AssetManager binding.
"""

from typing import List

from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..chain.client import ZERO_ADDRESS, TxResult
from ..chain.errors import ContractError
from ..chain.events import find_event, get_event_abi
from .base import ContractBinding
from .types import AgentInfo, CollateralReservation


class AssetManager(ContractBinding):
    ABI_NAMES = ("asset_manager",)

    def lot_size(self) -> int:
        """Lot size in underlying base units (drops for FXRP)."""
        return self._call("lotSize")

    def asset_minting_decimals(self) -> int:
        return self._call("assetMintingDecimals")

    def collateral_reservation_fee(self, lots: int) -> int:
        """Native fee in wei that must accompany reserveCollateral."""
        return self._call("collateralReservationFee", lots)

    def available_agents(self, start: int = 0, end: int = 20) -> List[AgentInfo]:
        agents, _total = self._call(
            "getAvailableAgentsDetailedList", start, end, label="Agent list"
        )
        return [
            AgentInfo(
                agent_vault=Web3.to_checksum_address(a[0]),
                owner_management_address=Web3.to_checksum_address(a[1]),
                fee_bips=a[2],
                minting_vault_collateral_ratio_bips=a[3],
                minting_pool_collateral_ratio_bips=a[4],
                free_collateral_lots=a[5],
                status=a[6],
            )
            for a in agents
        ]

    def reserve_collateral(
        self,
        signer: LocalAccount,
        agent_vault: str,
        lots: int,
        max_minting_fee_bips: int,
        reservation_fee: int,
        executor: str = ZERO_ADDRESS,
    ) -> TxResult:
        return self._transact(
            signer,
            "reserveCollateral",
            Web3.to_checksum_address(agent_vault),
            lots,
            max_minting_fee_bips,
            Web3.to_checksum_address(executor),
            value=reservation_fee,
            label="Reserve collateral",
        )

    def redeem(
        self,
        signer: LocalAccount,
        lots: int,
        underlying_address: str,
        executor: str = ZERO_ADDRESS,
    ) -> TxResult:
        return self._transact(
            signer,
            "redeem",
            lots,
            underlying_address,
            Web3.to_checksum_address(executor),
            label="Redeem",
        )

    def collateral_reserved(self, tx_result: TxResult) -> CollateralReservation:
        """
        Decode the CollateralReserved event emitted by a reservation.

        Raises:
            ContractError: If the receipt carries no such event from this contract
        """
        event_abi = get_event_abi(self.contract.abi, "CollateralReserved")
        args = find_event(tx_result.logs, event_abi, address=self.address)
        if args is None:
            raise ContractError(f"No CollateralReserved event in tx {tx_result.tx_hash}")

        return CollateralReservation(
            agent_vault=args["agentVault"],
            minter=args["minter"],
            reservation_id=args["collateralReservationId"],
            value_uba=args["valueUBA"],
            fee_uba=args["feeUBA"],
            first_underlying_block=args["firstUnderlyingBlock"],
            last_underlying_block=args["lastUnderlyingBlock"],
            last_underlying_timestamp=args["lastUnderlyingTimestamp"],
            payment_address=args["paymentAddress"],
            payment_reference=bytes(args["paymentReference"]),
            executor=args["executor"],
            executor_fee_nat_wei=args["executorFeeNatWei"],
        )
