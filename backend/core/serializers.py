from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from .models import User, Company, AuditLog


class CompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = [
            'id', 'company_official_name', 'company_alias', 'company_registration_id',
            'bank_account_number', 'address', 'tax_residency_country', 'logo_url', 'created_date'
        ]
        read_only_fields = ['created_date']

    def validate_company_official_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Company official name is required")
        return value.strip()


class UserSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.company_official_name', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'phone',
            'company', 'company_name', 'company_context', 'is_company_admin', 'is_global_admin',
            'preferred_language', 'timezone', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['company', 'company_context', 'is_global_admin', 'created_at', 'updated_at']


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = [
            'username', 'email', 'password', 'password_confirm', 'first_name', 'last_name',
            'phone', 'preferred_language', 'timezone'
        ]

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords don't match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        company = self.context.get('company')
        # Ensure user is active by default
        user = User.objects.create(
            **validated_data,
            company=company,
            company_context=company,
            is_active=True,
        )
        user.set_password(password)
        user.save()
        return user


class RegistrationSerializer(serializers.Serializer):
    """Self-service sign-up: creates the company and its first (admin) user"""
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    company_official_name = serializers.CharField(max_length=255)
    company_alias = serializers.CharField(max_length=255, required=False, allow_blank=True)
    company_registration_id = serializers.CharField(max_length=100)

    def validate_company_registration_id(self, value):
        if Company.objects.filter(company_registration_id=value).exists():
            raise serializers.ValidationError("A company with this registration number already exists")
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists() or User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    @transaction.atomic
    def create(self, validated_data):
        company = Company.objects.create(
            company_official_name=validated_data['company_official_name'],
            company_alias=validated_data.get('company_alias', ''),
            company_registration_id=validated_data['company_registration_id'],
        )
        # First user of a new company administers it
        user = User(
            username=validated_data['email'],
            email=validated_data['email'],
            first_name=validated_data['first_name'],
            last_name=validated_data['last_name'],
            company=company,
            company_context=company,
            is_company_admin=True,
            is_active=True,
        )
        user.set_password(validated_data['password'])
        user.save()
        return user


class AuditLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'user', 'username', 'company', 'action', 'model_name', 'object_id',
            'object_name', 'changes', 'ip_address', 'created_at'
        ]
