"""
Abstract repository interfaces.

Every repository instance is bound to one open connection and one tenant;
all reads and writes go through the transaction that produced it.
"""

from abc import ABC, abstractmethod

from procurement.core.entities import (
    LotStatus,
    Material,
    MaterialRequest,
    MaterialRequestStatus,
    OrderStatus,
    PurchaseLot,
    PurchaseOrder,
    PurchaseRequest,
    PurchaseRequestStatus,
    ReturnRequest,
    ReturnRequestStatus,
    StockMovement,
    Supplier,
    Unit,
)


class IMaterialRepository(ABC):
    """Materials and their quantity on hand."""

    @abstractmethod
    async def add(self, material: Material) -> Material:
        """Insert a new material."""

    @abstractmethod
    async def get(self, material_id: str) -> Material | None:
        """Get material by ID."""

    @abstractmethod
    async def find_by_name(self, name: str) -> Material | None:
        """Find a material by exact name."""

    @abstractmethod
    async def save_stock(self, material: Material, new_stock: float) -> Material:
        """
        Write a new stock value if the stored version still matches.

        Raises TransactionConflictError when another writer got there first.
        """

    @abstractmethod
    async def list(
        self,
        limit: int = 100,
        offset: int = 0,
        category: str | None = None,
    ) -> list[Material]:
        """List materials with pagination and optional category filter."""


class IUnitRepository(ABC):
    """Units of measure."""

    @abstractmethod
    async def ensure(self, name: str) -> bool:
        """Create the unit if missing. Returns True only when a row was created."""

    @abstractmethod
    async def list(self) -> list[Unit]:
        """List units ordered by name."""


class ISupplierRepository(ABC):
    """Suppliers."""

    @abstractmethod
    async def add(self, supplier: Supplier) -> Supplier:
        """Insert a new supplier."""

    @abstractmethod
    async def get(self, supplier_id: str) -> Supplier | None:
        """Get supplier by ID."""

    @abstractmethod
    async def list(self, limit: int = 100, offset: int = 0) -> list[Supplier]:
        """List suppliers ordered by name."""


class IPurchaseRequestRepository(ABC):
    """Purchase requests."""

    @abstractmethod
    async def add(self, request: PurchaseRequest) -> PurchaseRequest:
        """Insert a new request."""

    @abstractmethod
    async def get(self, request_id: str) -> PurchaseRequest | None:
        """Get request by ID."""

    @abstractmethod
    async def save(self, request: PurchaseRequest) -> PurchaseRequest:
        """Persist all mutable fields of an existing request."""

    @abstractmethod
    async def delete(self, request_id: str) -> bool:
        """Hard delete a request."""

    @abstractmethod
    async def list_by_lot(self, lot_id: str) -> list[PurchaseRequest]:
        """Requests currently referencing the lot, oldest first."""

    @abstractmethod
    async def list_by_order(self, order_id: str) -> list[PurchaseRequest]:
        """Requests bound to the order through purchase_order_id."""

    @abstractmethod
    async def list(
        self,
        status: PurchaseRequestStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[PurchaseRequest]:
        """List requests, newest first."""


class IPurchaseLotRepository(ABC):
    """Purchase lots."""

    @abstractmethod
    async def add(self, lot: PurchaseLot) -> PurchaseLot:
        """Insert a new lot."""

    @abstractmethod
    async def ensure(self, lot: PurchaseLot) -> tuple[PurchaseLot, bool]:
        """
        Insert the lot unless its ID exists. Returns (stored lot, created).

        Raises LotNotFoundError if the ID is taken outside this tenant.
        """

    @abstractmethod
    async def get(self, lot_id: str) -> PurchaseLot | None:
        """Get lot by ID."""

    @abstractmethod
    async def save(self, lot: PurchaseLot) -> PurchaseLot:
        """Persist status, name and supplier of an existing lot."""

    @abstractmethod
    async def delete(self, lot_id: str) -> bool:
        """Delete a lot."""

    @abstractmethod
    async def list(self, status: LotStatus | None = None) -> list[PurchaseLot]:
        """List lots ordered by name."""


class IPurchaseOrderRepository(ABC):
    """Purchase orders and quote requests."""

    @abstractmethod
    async def add(self, order: PurchaseOrder) -> PurchaseOrder:
        """Insert a new order."""

    @abstractmethod
    async def get(self, order_id: str) -> PurchaseOrder | None:
        """Get order by ID."""

    @abstractmethod
    async def save(self, order: PurchaseOrder) -> PurchaseOrder:
        """Persist status of an existing order."""

    @abstractmethod
    async def delete(self, order_id: str) -> bool:
        """Delete an order."""

    @abstractmethod
    async def list(
        self,
        lot_id: str | None = None,
        status: OrderStatus | None = None,
    ) -> list[PurchaseOrder]:
        """List orders, newest first."""


class IStockLedgerRepository(ABC):
    """Append-only stock movement log."""

    @abstractmethod
    async def append(self, movement: StockMovement) -> StockMovement:
        """Append a movement. Movements are never updated or deleted."""

    @abstractmethod
    async def list_for_material(
        self, material_id: str, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        """Movements of a material, newest first."""

    @abstractmethod
    async def list_for_request(self, request_id: str) -> list[StockMovement]:
        """Movements posted on behalf of a request."""

    @abstractmethod
    async def summarize(self, material_id: str) -> tuple[float, int, float | None]:
        """Return (sum of quantity_change, movement count, latest resulting_stock)."""


class IMaterialRequestRepository(ABC):
    """Warehouse material requests."""

    @abstractmethod
    async def add(self, request: MaterialRequest) -> MaterialRequest:
        """Insert a new material request."""

    @abstractmethod
    async def get(self, request_id: str) -> MaterialRequest | None:
        """Get material request by ID."""

    @abstractmethod
    async def save(self, request: MaterialRequest) -> MaterialRequest:
        """Persist decision fields of a material request."""

    @abstractmethod
    async def list(
        self, status: MaterialRequestStatus | None = None, limit: int = 100
    ) -> list[MaterialRequest]:
        """List material requests, newest first."""


class IReturnRequestRepository(ABC):
    """Warehouse return requests."""

    @abstractmethod
    async def add(self, request: ReturnRequest) -> ReturnRequest:
        """Insert a new return request."""

    @abstractmethod
    async def get(self, request_id: str) -> ReturnRequest | None:
        """Get return request by ID."""

    @abstractmethod
    async def save(self, request: ReturnRequest) -> ReturnRequest:
        """Persist completion fields of a return request."""

    @abstractmethod
    async def list(
        self, status: ReturnRequestStatus | None = None, limit: int = 100
    ) -> list[ReturnRequest]:
        """List return requests, newest first."""
