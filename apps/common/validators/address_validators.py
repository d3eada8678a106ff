"""
Address and contact validators for Indian pincodes and mobile numbers.
"""
import re
from rest_framework import serializers

PINCODE_PATTERN = re.compile(r'^[1-9]\d{5}$')
PHONE_PATTERN = re.compile(r'^(\+91)?[6-9]\d{9}$')


def validate_pincode(value):
    """
    Validate a six digit postal pincode.

    Args:
        value: Pincode string

    Raises:
        serializers.ValidationError: If the pincode is not six digits

    Returns:
        str: Trimmed pincode
    """
    value = str(value).strip()
    if not PINCODE_PATTERN.match(value):
        raise serializers.ValidationError("Invalid pincode. Expected 6 digits not starting with 0.")
    return value


def validate_phone(value):
    """Validate an Indian mobile number, optionally prefixed with +91"""
    if not value:
        return value

    if not PHONE_PATTERN.match(value):
        raise serializers.ValidationError("Invalid phone number format. Expected 10 digits starting with 6-9.")

    return value
