"""
Common validators module.

All validators are exported from this module to maintain backward compatibility.
"""
from .address_validators import validate_pincode, validate_phone
from .points_validators import validate_points_amount
from .price_validators import validate_price_range, validate_quantity

__all__ = [
    'validate_pincode',
    'validate_phone',
    'validate_points_amount',
    'validate_price_range',
    'validate_quantity',
]
