from .used_products import UsedProduct, Priced, QuoteRequested, SellerInfo, SUBMISSION_STATUSES, SUBMISSION_CONDITIONS
from .catalog import Product
from .reviews import ReviewEvent

__all__ = [
    'UsedProduct', 'Priced', 'QuoteRequested', 'SellerInfo',
    'SUBMISSION_STATUSES', 'SUBMISSION_CONDITIONS',
    'Product',
    'ReviewEvent',
]
