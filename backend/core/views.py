import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from django.shortcuts import get_object_or_404
from .filters import AuditLogFilter
from .models import Company, AuditLog
from .permissions import IsCompanyAdmin, IsGlobalAdmin, is_company_admin, is_global_admin
from .serializers import (
    UserSerializer, UserCreateSerializer, RegistrationSerializer,
    CompanySerializer, AuditLogSerializer
)
from .utils import get_company_context, set_company_context, create_audit_log

User = get_user_model()
logger = logging.getLogger(__name__)

GLOBAL_SEARCH_LIMIT = 20


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        # Company context starts at the user's own company
        if not self.user.company_context_id and self.user.company_id:
            set_company_context(self.user)
        create_audit_log(
            action='login', model_name='users', object_id=self.user.pk,
            user=self.user, object_name=self.user.username, company_id=self.user.company_context_id,
        )
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['company_id'] = user.company_id
        token['company_context'] = user.company_context_id or user.company_id
        token['is_company_admin'] = is_company_admin(user)
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports tokens of deleted users as invalid"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new company together with its first admin user"""
    serializer = RegistrationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'message': 'Invalid data', 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
    try:
        user = serializer.save()
    except IntegrityError as e:
        logger.error(f"IntegrityError registering company: {str(e)}", exc_info=True)
        return Response(
            {'message': 'A company or user with these details already exists'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    logger.info("Registered company %s with admin user %s", user.company_id, user.username)
    token = CustomTokenObtainPairSerializer.get_token(user)
    return Response({
        'message': 'Registration successful',
        'user': UserSerializer(user).data,
        'access': str(token.access_token),
        'refresh': str(token),
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with company context and admin flags"""
    user = request.user
    user_data = UserSerializer(user).data
    context_id = get_company_context(request)
    context_company = Company.objects.filter(pk=context_id).first() if context_id else None
    user_data['company_context'] = context_id
    user_data['company_context_name'] = str(context_company) if context_company else None
    user_data['is_admin'] = is_company_admin(user)
    user_data['is_global_admin'] = is_global_admin(user)
    return Response(user_data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def switch_company_context(request):
    """Switch the company whose data the caller works on"""
    company_id = request.data.get('company_id')
    if not company_id:
        return Response({'message': 'company_id is required'}, status=status.HTTP_400_BAD_REQUEST)
    company = Company.objects.filter(pk=company_id).first()
    if company is None:
        return Response({'message': 'Company not found'}, status=status.HTTP_404_NOT_FOUND)
    if not is_global_admin(request.user) and company.pk != request.user.company_id:
        return Response({'message': 'You can only work in your own company'}, status=status.HTTP_403_FORBIDDEN)

    set_company_context(request.user, company)
    create_audit_log(
        request, action='context_switch', model_name='companies', object_id=company.pk,
        object_name=str(company), company_id=company.pk,
    )
    return Response({'company_context': company.pk, 'company_context_name': str(company)})


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsCompanyAdmin])
def user_list_create(request):
    """List users of the caller's company or create a new one in it"""
    company_id = get_company_context(request)
    if request.method == 'GET':
        if not company_id:
            return Response([])
        users = User.objects.filter(company_id=company_id).order_by('username')
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)

    if not company_id:
        return Response(
            {'message': 'Your account is not associated with a company; cannot create users'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    serializer = UserCreateSerializer(data=request.data, context={'company': Company.objects.get(pk=company_id)})
    if serializer.is_valid():
        user = serializer.save()
        create_audit_log(request, action='create', model_name='users', object_id=user.pk, object_name=user.username)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsCompanyAdmin])
def user_detail(request, pk):
    """Retrieve, update or delete a user of the caller's company"""
    user = get_object_or_404(User, pk=pk, company_id=get_company_context(request))

    if request.method == 'GET':
        serializer = UserSerializer(user)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserSerializer(user, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request, action='update', model_name='users', object_id=user.pk,
                object_name=user.username, changes={'fields': sorted(request.data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if user.pk == request.user.pk:
            return Response({'message': 'You cannot delete your own user'}, status=status.HTTP_400_BAD_REQUEST)
        if user.owned_accounts.exists():
            return Response(
                {'message': 'Cannot delete user who owns accounts'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        create_audit_log(request, action='delete', model_name='users', object_id=user.pk, object_name=user.username)
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Company views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsGlobalAdmin])
def company_list_create(request):
    """List all companies or create a new company"""
    if request.method == 'GET':
        companies = Company.objects.all()
        serializer = CompanySerializer(companies, many=True)
        return Response(serializer.data)
    else:
        serializer = CompanySerializer(data=request.data)
        if serializer.is_valid():
            company = serializer.save()
            create_audit_log(
                request, action='create', model_name='companies', object_id=company.pk,
                object_name=str(company), company_id=company.pk,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsGlobalAdmin])
def company_detail(request, pk):
    """Retrieve, update or delete a company"""
    company = get_object_or_404(Company, pk=pk)

    if request.method == 'GET':
        serializer = CompanySerializer(company)
        return Response(serializer.data)
    elif request.method == 'PUT':
        serializer = CompanySerializer(company, data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    elif request.method == 'PATCH':
        serializer = CompanySerializer(company, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if company.users.exists():
            return Response({'message': 'Cannot delete company with users'}, status=status.HTTP_400_BAD_REQUEST)
        company.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def company_name(request):
    """Name of the company in the caller's context"""
    company_id = get_company_context(request)
    company = Company.objects.filter(pk=company_id).first() if company_id else None
    return Response({'company_name': str(company) if company else None})


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = AuditLog.objects.select_related('user')

    if is_company_admin(request.user):
        queryset = queryset.filter(company_id=get_company_context(request))
    else:
        queryset = queryset.filter(user=request.user)

    filterset = AuditLogFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)

    queryset = filterset.qs.order_by('-created_at')
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if is_company_admin(request.user):
        allowed = audit_log.company_id == get_company_context(request)
    else:
        allowed = audit_log.user_id == request.user.pk
    if not allowed:
        return Response({'message': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def global_search(request):
    """Search every registered business object of the caller's company"""
    from backend.objects.registry import registry
    from backend.objects import services

    query = request.query_params.get('q', '').strip()
    company_id = get_company_context(request)

    results = {}
    for object_type in registry.all():
        if not query or not company_id:
            results[object_type.code] = []
            continue
        records = services.list_records(object_type.code, company_id, search=query)[:GLOBAL_SEARCH_LIMIT]
        results[object_type.code] = object_type.serializer_class(records, many=True).data

    return Response(results)
