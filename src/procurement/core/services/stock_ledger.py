"""
Stock ledger service.

The only code path that changes a material's stock. Every call writes the
new stock value and appends the matching movement through the same
transaction, so the ledger sum and the stock never diverge.
"""

from procurement.config import get_logger
from procurement.core.entities import (
    LedgerAudit,
    Material,
    MovementType,
    StockMovement,
    quantize_quantity,
)
from procurement.core.exceptions import InsufficientStockError, ValidationError
from procurement.core.interfaces import ITransaction

logger = get_logger(__name__)


class StockLedgerService:
    """
    Posts signed quantity changes against materials.

    Pure service: no infrastructure imports, the transaction is passed in by
    the caller so the stock write joins whatever else the caller is doing.
    """

    async def post_movement(
        self,
        tx: ITransaction,
        material: Material,
        quantity_change: float,
        movement_type: MovementType,
        justification: str,
        actor_id: str,
        actor_name: str = "",
        related_request_id: str | None = None,
    ) -> StockMovement:
        """
        Apply a stock change and append its ledger entry.

        Args:
            tx: Open write transaction.
            material: Material as re-read inside `tx`.
            quantity_change: Signed delta, non-zero once rounded to the quantity scale.
            movement_type: Reason for the change.
            justification: Free-text explanation stored on the entry.
            actor_id: Who performed the change.
            actor_name: Display name for the audit trail.
            related_request_id: Request the change was posted for, if any.

        Returns:
            The appended movement.

        Raises:
            InsufficientStockError: If the change would take stock below zero.
            TransactionConflictError: If the material changed concurrently.
        """
        quantity_change = quantize_quantity(quantity_change)
        if quantity_change == 0:
            raise ValidationError("quantity_change", "must be non-zero", quantity_change)

        resulting_stock = quantize_quantity(material.stock + quantity_change)
        if resulting_stock < 0:
            raise InsufficientStockError(
                material_id=material.id,
                requested=abs(quantity_change),
                available=material.stock,
                material_name=material.name,
            )

        await tx.materials.save_stock(material, resulting_stock)

        movement = StockMovement(
            tenant_id=material.tenant_id,
            material_id=material.id,
            material_name=material.name,
            quantity_change=quantity_change,
            resulting_stock=resulting_stock,
            type=movement_type,
            justification=justification,
            actor_id=actor_id,
            actor_name=actor_name,
            related_request_id=related_request_id,
        )
        await tx.ledger.append(movement)

        logger.info(
            "stock_movement_posted",
            material_id=material.id,
            type=movement_type.value,
            change=quantity_change,
            resulting_stock=resulting_stock,
            related_request_id=related_request_id,
        )
        return movement

    async def audit(self, tx: ITransaction, material: Material) -> LedgerAudit:
        """Replay the ledger of a material and compare it with its stock."""
        total, count, last = await tx.ledger.summarize(material.id)
        audit = LedgerAudit(
            material_id=material.id,
            stock=material.stock,
            ledger_total=total,
            movement_count=count,
            last_resulting_stock=last,
        )
        if not audit.balanced:
            logger.warning(
                "ledger_imbalance_detected",
                material_id=material.id,
                stock=material.stock,
                ledger_total=total,
                last_resulting_stock=last,
            )
        return audit
