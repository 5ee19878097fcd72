from enum import StrEnum


class PaymentMethod(StrEnum):
    UPI = 'UPI'
    CARD = 'Card'
    NET_BANKING = 'NetBanking'
    WALLET = 'Wallet'
