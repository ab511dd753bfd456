from app.models.audit import AuditLog
from app.models.inventory import Expense, ExpenseCategory, Product, ProductStatus, VendorBill
from app.models.sales import Bill, BillItem, BillSequence, Cart, CartLine, PaymentMethod, PriceTier
from app.models.user import Profile, UserRole

__all__ = [
    "AuditLog",
    "Bill",
    "BillItem",
    "BillSequence",
    "Cart",
    "CartLine",
    "Expense",
    "ExpenseCategory",
    "PaymentMethod",
    "PriceTier",
    "Product",
    "ProductStatus",
    "Profile",
    "UserRole",
    "VendorBill",
]
