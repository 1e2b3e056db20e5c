"""Transaction categories and the mapping from free-text labels.

Ledger logic switches on :class:`TransactionCategory` only. Free-text labels
coming from stores, imports or the CLI are resolved once, at the boundary,
through :func:`parse_category`.

Legacy label table (label -> category):

==============================================  ==============================
Label                                           Category
==============================================  ==============================
Sale / Bán hàng                                 SALE
Service / Cung cấp dịch vụ                      SERVICE
Rental income / Cho thuê tài sản                RENTAL_INCOME
Customer debt payment / Thu nợ khách hàng       CUSTOMER_DEBT_COLLECTION
Return to supplier / Trả hàng cho nhà cung cấp  SUPPLIER_RETURN
Other income                                    OTHER_INCOME
Purchase / Nhập hàng                            PURCHASE
Customer return / Khách trả hàng                CUSTOMER_RETURN
Materials / Chi phí nguyên vật liệu             MATERIALS
Supplier debt payment / Trả nợ nhà cung cấp     SUPPLIER_DEBT_PAYMENT
Tax payment / Nộp thuế                          TAX_PAYMENT
Labor cost / Chi phí nhân công                  LABOR_COST
Salary payment / Thanh toán lương nhân viên     SALARY_PAYMENT
Social insurance / Nộp Bảo hiểm xã hội          SOCIAL_INSURANCE_PAYMENT
Health insurance / Nộp Bảo hiểm y tế            HEALTH_INSURANCE_PAYMENT
Unemployment insurance /
Nộp Bảo hiểm thất nghiệp                        UNEMPLOYMENT_INSURANCE_PAYMENT
Union fee / Nộp Kinh phí công đoàn              UNION_FEE_PAYMENT
Electricity / Chi phí điện                      ELECTRICITY
Water / Chi phí nước                            WATER
Telecom / Chi phí viễn thông                    TELECOM
Rent / Chi phí thuê kho bãi, mặt bằng
kinh doanh                                      RENT
Management / Chi phí quản lý                    MANAGEMENT
Other expense / Chi phí khác                    OTHER_EXPENSE
anything else                                   OTHER
==============================================  ==============================
"""

from enum import Enum
from typing import Optional


class TransactionCategory(str, Enum):
    """Closed set of transaction categories."""

    SALE = "Sale"
    SERVICE = "Service"
    RENTAL_INCOME = "Rental income"
    CUSTOMER_DEBT_COLLECTION = "Customer debt payment"
    SUPPLIER_RETURN = "Return to supplier"
    OTHER_INCOME = "Other income"
    PURCHASE = "Purchase"
    CUSTOMER_RETURN = "Customer return"
    MATERIALS = "Materials"
    SUPPLIER_DEBT_PAYMENT = "Supplier debt payment"
    TAX_PAYMENT = "Tax payment"
    LABOR_COST = "Labor cost"
    SALARY_PAYMENT = "Salary payment"
    SOCIAL_INSURANCE_PAYMENT = "Social insurance"
    HEALTH_INSURANCE_PAYMENT = "Health insurance"
    UNEMPLOYMENT_INSURANCE_PAYMENT = "Unemployment insurance"
    UNION_FEE_PAYMENT = "Union fee"
    ELECTRICITY = "Electricity"
    WATER = "Water"
    TELECOM = "Telecom"
    RENT = "Rent"
    MANAGEMENT = "Management"
    OTHER_EXPENSE = "Other expense"
    OTHER = "Other"


_C = TransactionCategory

LEGACY_LABELS: dict[str, TransactionCategory] = {
    "Bán hàng": _C.SALE,
    "Cung cấp dịch vụ": _C.SERVICE,
    "Cho thuê tài sản": _C.RENTAL_INCOME,
    "Thu nợ khách hàng": _C.CUSTOMER_DEBT_COLLECTION,
    "Trả hàng cho nhà cung cấp": _C.SUPPLIER_RETURN,
    "Nhập hàng": _C.PURCHASE,
    "Khách trả hàng": _C.CUSTOMER_RETURN,
    "Chi phí nguyên vật liệu": _C.MATERIALS,
    "Trả nợ nhà cung cấp": _C.SUPPLIER_DEBT_PAYMENT,
    "Nộp thuế": _C.TAX_PAYMENT,
    "Chi phí nhân công": _C.LABOR_COST,
    "Thanh toán lương nhân viên": _C.SALARY_PAYMENT,
    "Nộp Bảo hiểm xã hội": _C.SOCIAL_INSURANCE_PAYMENT,
    "Nộp Bảo hiểm y tế": _C.HEALTH_INSURANCE_PAYMENT,
    "Nộp Bảo hiểm thất nghiệp": _C.UNEMPLOYMENT_INSURANCE_PAYMENT,
    "Nộp Kinh phí công đoàn": _C.UNION_FEE_PAYMENT,
    "Chi phí điện": _C.ELECTRICITY,
    "Chi phí nước": _C.WATER,
    "Chi phí viễn thông": _C.TELECOM,
    "Chi phí thuê kho bãi, mặt bằng kinh doanh": _C.RENT,
    "Chi phí quản lý": _C.MANAGEMENT,
    "Chi phí khác": _C.OTHER_EXPENSE,
}

# Recorded as income unless the caller says otherwise
INCOME_CATEGORIES = frozenset(
    {
        _C.SALE,
        _C.SERVICE,
        _C.RENTAL_INCOME,
        _C.CUSTOMER_DEBT_COLLECTION,
        _C.SUPPLIER_RETURN,
        _C.OTHER_INCOME,
    }
)

# Stock movements
ISSUE_CATEGORIES = frozenset({_C.SALE, _C.SUPPLIER_RETURN})
RECEIPT_CATEGORIES = frozenset({_C.PURCHASE, _C.CUSTOMER_RETURN})

# Revenue ledger and tax accrual
REVENUE_CATEGORIES = frozenset({_C.SALE, _C.SERVICE})
TAXABLE_CATEGORIES = frozenset({_C.SALE, _C.SERVICE, _C.RENTAL_INCOME})

PAYROLL_REMITTANCE_CATEGORIES = frozenset(
    {
        _C.SALARY_PAYMENT,
        _C.SOCIAL_INSURANCE_PAYMENT,
        _C.HEALTH_INSURANCE_PAYMENT,
        _C.UNEMPLOYMENT_INSURANCE_PAYMENT,
        _C.UNION_FEE_PAYMENT,
    }
)
PAYROLL_CATEGORIES = PAYROLL_REMITTANCE_CATEGORIES | {_C.LABOR_COST}

# These have dedicated ledgers and never show up in the expense ledger.
EXPENSE_LEDGER_EXCLUDED = PAYROLL_CATEGORIES | {
    _C.PURCHASE,
    _C.CUSTOMER_RETURN,
    _C.MATERIALS,
    _C.SUPPLIER_DEBT_PAYMENT,
    _C.TAX_PAYMENT,
}

# Debt scan
CUSTOMER_CHARGE_CATEGORIES = frozenset({_C.SALE})
CUSTOMER_CREDIT_CATEGORIES = frozenset({_C.CUSTOMER_DEBT_COLLECTION, _C.CUSTOMER_RETURN})
SUPPLIER_CREDIT_CATEGORIES = frozenset({_C.SUPPLIER_DEBT_PAYMENT, _C.SUPPLIER_RETURN})


def _build_lookup() -> dict[str, TransactionCategory]:
    lookup: dict[str, TransactionCategory] = {}
    for category in TransactionCategory:
        lookup[category.name.casefold()] = category
        lookup[category.value.casefold()] = category
    for label, category in LEGACY_LABELS.items():
        lookup[label.casefold()] = category
    return lookup


_LOOKUP = _build_lookup()


def parse_category(label: Optional[str]) -> TransactionCategory:
    """Resolve a free-text category label.

    Accepts enum names ("SALE"), English labels ("Sale") and legacy labels
    ("Bán hàng"), case-insensitively.

    Args:
        label: Category label, or None

    Returns:
        Matching category, or ``TransactionCategory.OTHER`` for unknown labels
    """
    if isinstance(label, TransactionCategory):
        return label
    if not label:
        return TransactionCategory.OTHER
    return _LOOKUP.get(label.strip().casefold(), TransactionCategory.OTHER)
