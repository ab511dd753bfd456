class PosError(Exception):
    """Base class for errors returned to the POS client for display."""

    code = "pos_error"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFound(PosError):
    code = "not_found"


class Unavailable(PosError):
    code = "unavailable"


class SoldOut(Unavailable):
    """Atomic stock debit matched no row; carries the SKUs to drop from the cart."""

    code = "sold_out"

    def __init__(self, skus: list[str]):
        super().__init__(f"Sold out: {', '.join(skus)}", details={"skus": skus})
        self.skus = skus


class DuplicateInCart(PosError):
    code = "duplicate_in_cart"


class EmptyCart(PosError):
    code = "empty_cart"


class BillNumberGenerationFailed(PosError):
    code = "bill_number_generation_failed"


class PartialWriteFailure(PosError):
    """Some writes landed and some did not; needs manual reconciliation."""

    code = "partial_write_failure"

    def __init__(self, message: str, *, bill_id: int, skus: list[str]):
        super().__init__(message, details={"bill_id": bill_id, "skus": skus})
        self.bill_id = bill_id
        self.skus = skus


class StoreUnavailable(PosError):
    code = "store_unavailable"
