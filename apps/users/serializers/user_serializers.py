"""
User serializers for profile display and customer registration.
"""
from rest_framework import serializers
from django.contrib.auth.hashers import make_password
from apps.common.validators import validate_phone
from ..models import User


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Public view of an account.
    Does not include the password hash.
    """

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'phone', 'first_name', 'last_name',
            'role', 'created_at'
        ]
        read_only_fields = fields


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for customer registration.
    Used for: POST /api/auth/register/
    """
    password = serializers.CharField(write_only=True, min_length=8)
    confirm_password = serializers.CharField(write_only=True)
    phone = serializers.CharField(
        required=False,
        allow_blank=True,
        validators=[validate_phone],
        help_text="10 digit mobile number, optionally prefixed with +91"
    )
    email = serializers.EmailField()

    class Meta:
        model = User
        fields = [
            'username', 'email', 'phone', 'password', 'confirm_password',
            'first_name', 'last_name'
        ]

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists")
        return value.lower()

    def validate(self, attrs):
        if attrs.get('password') != attrs.get('confirm_password'):
            raise serializers.ValidationError({
                'confirm_password': "Passwords don't match"
            })
        return attrs

    def create(self, validated_data):
        """Create a customer with a hashed password"""
        validated_data.pop('confirm_password')
        validated_data['password'] = make_password(validated_data['password'])
        validated_data['role'] = User.ROLE_CUSTOMER
        return User.objects.create(**validated_data)
