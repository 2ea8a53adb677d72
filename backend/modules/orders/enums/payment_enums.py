from enum import Enum


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, Enum):
    """Tags recorded on a payment; no gateway is contacted for any of them."""
    CASH = "cash"
    CARD = "card"
    GOOGLE_PAY = "google_pay"
    PHONEPE = "phonepe"
