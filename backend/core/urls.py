from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, register, user_me,
    switch_company_context,
    user_list_create, user_detail,
    company_list_create, company_detail, company_name,
    audit_log_list, audit_log_detail,
    global_search
)

urlpatterns = [
    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/company-context/', switch_company_context, name='switch-company-context'),

    # User endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # Company endpoints
    path('companies/', company_list_create, name='company-list-create'),
    path('companies/current/name/', company_name, name='company-name'),
    path('companies/<int:pk>/', company_detail, name='company-detail'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),

    # Global search endpoint
    path('search/', global_search, name='global-search'),
]
