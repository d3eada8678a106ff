"""
Points-related validators.
"""
from rest_framework import serializers


def validate_points_amount(value):
    """
    Validate a points amount sent by a client.

    Thresholds such as the minimum redemption are business rules checked by
    the loyalty ledger; this only rejects values that can never be valid.

    Raises:
        serializers.ValidationError: If points amount is not positive
    """
    if value <= 0:
        raise serializers.ValidationError("Points amount must be greater than 0.")

    return value
