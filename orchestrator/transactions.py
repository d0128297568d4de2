# ============================================================================
# TRANSACTION ORCHESTRATOR
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Orchestrator - State-changing ledger operations
# PURPOSE: Pre-flight, submit, await confirmation, report exact outcome
# CREATED: 19 OCT 2026
# ============================================================================
"""
Transaction Orchestrator

Every state-changing operation goes through here:

    pre-flight (reads only) -> authorize -> submit -> await confirmation

and resolves to an OperationResult or BatchMintResult. Ledger errors
never escape a single operation; the caller gets a classified outcome
and a message it can show as-is.

Multi-plot minting:
    mint_plots             one batch transaction for <= chunk_size plots,
                           otherwise consecutive chunks, each confirmed
                           before the next is submitted
    mint_plots_sequential  one mint per plot through RateLimitedQueue
                           with a fixed interval (fallback for ledgers
                           without batch minting)

Both multi-plot paths stop immediately when the user rejects a
transaction and keep going after any other failure. Nothing is retried
automatically: a retried mint is a second mint.

Usage:
    orchestrator = TransactionOrchestrator(gateway)
    result = await orchestrator.buy_plot(token_id=17, price_wei=10**17)
    if not result.succeeded:
        print(result.message)
"""

import asyncio
from typing import Awaitable, Callable, Optional

from core.config import MintDefaults, get_defaults
from core.contracts import FailureKind, MintMode, OperationOutcome
from core.errors import (
    ConfigurationError,
    ImageValidationError,
    LedgerError,
    PinningError,
)
from core.logging import get_logger, log_context, log_checkpoint, ComponentType
from core.models import BatchMintResult, NewLandProject, OperationResult, TransactionReceipt
from orchestrator.queue import RateLimitedQueue
from services.preflight import PreflightResult, TransactionPreflight

logger = get_logger(__name__, ComponentType.ORCHESTRATOR)

# (completed, total)
ProgressCallback = Callable[[int, int], None]

USER_REJECTED_MESSAGE = "Transaction rejected by user"
INSUFFICIENT_FUNDS_MESSAGE = "Insufficient funds to complete this transaction"


def _label(operation: str) -> str:
    return operation.replace("_", " ").capitalize()


def failure_result(operation: str, error: LedgerError) -> OperationResult:
    """Map a classified ledger error to the caller-facing result."""
    if error.kind == FailureKind.USER_REJECTED:
        logger.info(f"{operation}: rejected by user")
        return OperationResult(
            operation=operation,
            outcome=OperationOutcome.REJECTED,
            message=USER_REJECTED_MESSAGE,
            failure=error.kind,
        )
    if error.kind == FailureKind.INSUFFICIENT_FUNDS:
        logger.warning(f"{operation}: insufficient funds")
        return OperationResult(
            operation=operation,
            outcome=OperationOutcome.INSUFFICIENT_FUNDS,
            message=INSUFFICIENT_FUNDS_MESSAGE,
            failure=error.kind,
        )
    logger.error(f"{operation} failed ({error.kind.value}): {error}")
    return OperationResult(
        operation=operation,
        outcome=OperationOutcome.FAILED,
        message=f"{_label(operation)} failed. Please try again.",
        failure=error.kind,
    )


def refused_result(operation: str, preflight: PreflightResult) -> OperationResult:
    logger.warning(f"{operation} refused by pre-flight: {'; '.join(preflight.errors)}")
    return OperationResult(
        operation=operation,
        outcome=OperationOutcome.PREFLIGHT_REJECTED,
        message="; ".join(preflight.errors),
        failure=FailureKind.PREFLIGHT_REJECTED,
        reasons=list(preflight.errors),
    )


class TransactionOrchestrator:
    """
    Drives state-changing ledger operations.

    Holds no ledger state of its own; read models must be re-resolved after
    a successful write.
    """

    def __init__(
        self,
        gateway,
        preflight: Optional[TransactionPreflight] = None,
        pinning=None,
        mint_defaults: Optional[MintDefaults] = None,
        sleep: Callable[[float], Awaitable] = asyncio.sleep,
    ):
        """
        Args:
            gateway: ContractGateway bound to a signer
            preflight: Pre-flight guards (defaults to TransactionPreflight(gateway))
            pinning: Optional PinningClient for project images
            mint_defaults: Chunk size and sequential interval
            sleep: Awaitable sleep used by the sequential queue
        """
        self.gateway = gateway
        self.preflight = preflight or TransactionPreflight(gateway)
        self.pinning = pinning
        self.mint_defaults = mint_defaults or get_defaults().mint
        self.queue = RateLimitedQueue(
            min_interval=self.mint_defaults.sequential_interval_seconds,
            sleep=sleep,
            handled=(LedgerError,),
        )
        self._stop_requested = False

    def stop(self) -> None:
        """Stop a running multi-plot mint before its next chunk or item."""
        self._stop_requested = True
        self.queue.stop()

    # ========================================================================
    # SINGLE OPERATIONS
    # ========================================================================

    async def _submit(
        self,
        operation: str,
        write: Callable[[], Awaitable[TransactionReceipt]],
    ) -> OperationResult:
        try:
            receipt = await write()
        except LedgerError as e:
            return failure_result(operation, e)

        logger.info(f"{operation} confirmed in {receipt.tx_hash}")
        return OperationResult(
            operation=operation,
            outcome=OperationOutcome.SUCCESS,
            message=f"{_label(operation)} confirmed",
            receipt=receipt,
        )

    async def buy_plot(self, token_id: int, price_wei: int) -> OperationResult:
        """Primary purchase from the platform owner at the mint price."""
        with log_context(operation="buy_plot", token_id=token_id):
            preflight = self.preflight.check_payment(price_wei)
            if not preflight.valid:
                return refused_result("buy_plot", preflight)
            return await self._submit(
                "buy_plot", lambda: self.gateway.buy(token_id, price_wei)
            )

    async def buy_resale(self, token_id: int, price_wei: int) -> OperationResult:
        """Secondary purchase at the seller's listed price."""
        with log_context(operation="buy_resale", token_id=token_id):
            preflight = self.preflight.check_payment(price_wei)
            if not preflight.valid:
                return refused_result("buy_resale", preflight)
            return await self._submit(
                "buy_resale", lambda: self.gateway.buy_resale(token_id, price_wei)
            )

    async def list_for_sale(self, token_id: int, price_wei: int) -> OperationResult:
        with log_context(operation="list_for_sale", token_id=token_id):
            preflight = self.preflight.check_listing(price_wei)
            if not preflight.valid:
                return refused_result("list_for_sale", preflight)
            return await self._submit(
                "list_for_sale", lambda: self.gateway.list_for_sale(token_id, price_wei)
            )

    async def unlist(self, token_id: int) -> OperationResult:
        with log_context(operation="unlist", token_id=token_id):
            return await self._submit("unlist", lambda: self.gateway.unlist(token_id))

    async def mint_plot(self, land_id: int) -> OperationResult:
        """Mint one plot into the platform owner's inventory."""
        with log_context(operation="mint_plot", land_id=land_id):
            preflight = await self.preflight.check_mint(land_id, 1)
            if not preflight.valid:
                return refused_result("mint_plot", preflight)
            return await self._submit("mint_plot", lambda: self.gateway.mint_one(land_id))

    async def hold_project(self, land_id: int) -> OperationResult:
        with log_context(operation="hold_project", land_id=land_id):
            return await self._submit(
                "hold_project", lambda: self.gateway.hold_project(land_id)
            )

    async def unhold_project(self, land_id: int) -> OperationResult:
        with log_context(operation="unhold_project", land_id=land_id):
            return await self._submit(
                "unhold_project", lambda: self.gateway.unhold_project(land_id)
            )

    async def set_hold(self, land_id: int, hold: bool) -> OperationResult:
        """Toggle a project's hold flag (management view switch)."""
        if hold:
            return await self.hold_project(land_id)
        return await self.unhold_project(land_id)

    async def deactivate_project(self, land_id: int) -> OperationResult:
        with log_context(operation="deactivate_project", land_id=land_id):
            return await self._submit(
                "deactivate_project", lambda: self.gateway.deactivate_project(land_id)
            )

    async def delete_project(self, land_id: int) -> OperationResult:
        """
        Delete a project that has nothing minted.

        The minted counter is read live first; a project with minted plots
        (or one whose counter cannot be read) is refused without a write.
        """
        with log_context(operation="delete_project", land_id=land_id):
            preflight = await self.preflight.check_delete(land_id)
            if not preflight.valid:
                return refused_result("delete_project", preflight)
            return await self._submit(
                "delete_project", lambda: self.gateway.delete_project(land_id)
            )

    async def create_project(
        self,
        project: NewLandProject,
        image: Optional[bytes] = None,
        image_filename: str = "project.png",
        image_content_type: str = "image/png",
    ) -> OperationResult:
        """
        Create a land project, uploading its image first when given.

        A failed upload ends the operation before any ledger write.
        """
        with log_context(operation="create_project"):
            if image is not None:
                if self.pinning is None:
                    return OperationResult(
                        operation="create_project",
                        outcome=OperationOutcome.FAILED,
                        message="Image upload failed: no image store configured",
                    )
                try:
                    image_ref = await self.pinning.store(
                        image, image_filename, image_content_type
                    )
                except (PinningError, ImageValidationError, ConfigurationError) as e:
                    logger.error(f"Image upload failed: {e}")
                    return OperationResult(
                        operation="create_project",
                        outcome=OperationOutcome.FAILED,
                        message=f"Image upload failed: {e}",
                    )
                project = project.model_copy(update={"image_ref": image_ref})

            return await self._submit(
                "create_project", lambda: self.gateway.create_project(project)
            )

    # ========================================================================
    # MULTI-PLOT MINTING
    # ========================================================================

    async def _mint_preflight(
        self, land_id: int, count: int, mode: MintMode
    ) -> Optional[BatchMintResult]:
        preflight = await self.preflight.check_mint(land_id, count)
        if preflight.valid:
            return None
        logger.warning(f"Mint of {count} refused by pre-flight: {'; '.join(preflight.errors)}")
        return BatchMintResult(
            land_id=land_id,
            mode=mode,
            requested=max(count, 0),
            stopped_by=FailureKind.PREFLIGHT_REJECTED,
            reasons=list(preflight.errors),
        )

    async def mint_plots(
        self,
        land_id: int,
        count: int,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchMintResult:
        """
        Mint `count` plots with batch transactions.

        One transaction when count fits in a chunk; otherwise chunks of at
        most chunk_size, submitted only after the previous one confirmed.

        Returns:
            BatchMintResult with per-chunk accounting
        """
        sizes = self.mint_defaults.chunks(count)
        mode = MintMode.BATCH if len(sizes) <= 1 else MintMode.CHUNKED
        self._stop_requested = False

        with log_context(operation="mint_plots", land_id=land_id):
            refused = await self._mint_preflight(land_id, count, mode)
            if refused is not None:
                return refused

            result = BatchMintResult(land_id=land_id, mode=mode, requested=count)
            log_checkpoint("mint_started", {"mode": mode.value, "chunks": sizes}, logger)

            for index, size in enumerate(sizes):
                if self._stop_requested:
                    logger.info(f"Mint stopped before chunk {index + 1}/{len(sizes)}")
                    break

                with log_context(extra={"chunk": index + 1, "chunk_size": size}):
                    try:
                        receipt = await self.gateway.mint_batch(land_id, size)
                    except LedgerError as e:
                        result.failures.append(e.kind)
                        if e.kind == FailureKind.USER_REJECTED:
                            result.stopped_by = e.kind
                            logger.info(
                                f"Chunk {index + 1}/{len(sizes)} rejected by user, stopping"
                            )
                            break
                        result.chunk_sizes.append(size)
                        result.failed += size
                        logger.warning(
                            f"Chunk {index + 1}/{len(sizes)} of {size} failed "
                            f"({e.kind.value}): {e}"
                        )
                    else:
                        result.chunk_sizes.append(size)
                        result.succeeded += size
                        result.receipts.append(receipt)
                        log_checkpoint(
                            "mint_chunk_confirmed",
                            {"chunk": index + 1, "size": size, "tx_hash": receipt.tx_hash},
                            logger,
                        )

                if on_progress is not None:
                    on_progress(result.succeeded + result.failed, count)

            log_checkpoint(
                "mint_finished",
                {"outcome": result.outcome.value, "succeeded": result.succeeded},
                logger,
            )
            logger.info(result.summary())
            return result

    async def mint_plots_sequential(
        self,
        land_id: int,
        count: int,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchMintResult:
        """
        Mint `count` plots one transaction at a time.

        Items go through the rate-limited queue, so at least
        sequential_interval_seconds pass between consecutive submissions.
        """
        self._stop_requested = False
        self.queue.reset()

        with log_context(operation="mint_plots_sequential", land_id=land_id):
            refused = await self._mint_preflight(land_id, count, MintMode.SEQUENTIAL)
            if refused is not None:
                return refused

            result = BatchMintResult(land_id=land_id, mode=MintMode.SEQUENTIAL, requested=count)

            def on_result(index: int, receipt, error: Optional[BaseException]) -> bool:
                if error is None:
                    result.chunk_sizes.append(1)
                    result.succeeded += 1
                    result.receipts.append(receipt)
                else:
                    result.failures.append(error.kind)
                    if error.kind == FailureKind.USER_REJECTED:
                        result.stopped_by = error.kind
                        logger.info(f"Plot {index + 1}/{count} rejected by user, stopping")
                        return False
                    result.chunk_sizes.append(1)
                    result.failed += 1
                    logger.warning(f"Plot {index + 1}/{count} failed ({error.kind.value}): {error}")

                if on_progress is not None:
                    on_progress(result.succeeded + result.failed, count)
                return True

            tasks = [lambda: self.gateway.mint_one(land_id) for _ in range(count)]
            await self.queue.run(tasks, on_result)

            logger.info(result.summary())
            return result


__all__ = [
    "TransactionOrchestrator",
    "ProgressCallback",
    "failure_result",
    "refused_result",
    "USER_REJECTED_MESSAGE",
    "INSUFFICIENT_FUNDS_MESSAGE",
]
