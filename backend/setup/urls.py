from django.urls import path
from . import views

urlpatterns = [
    # Role hierarchy
    path('company-roles/', views.company_role_list_create, name='company-role-list-create'),
    path('company-roles/tree/', views.company_role_tree, name='company-role-tree'),
    path('company-roles/<int:pk>/', views.company_role_detail, name='company-role-detail'),
    path('user-role-assignments/', views.user_role_assignment_list_create, name='user-role-assignment-list-create'),
    path('user-role-assignments/<int:pk>/', views.user_role_assignment_detail, name='user-role-assignment-detail'),

    path('releases/', views.release_list_create, name='release-list-create'),
    path('releases/<int:pk>/', views.release_detail, name='release-detail'),
    path('translations/', views.translation_list_create, name='translation-list-create'),
    path('translations/<int:pk>/', views.translation_detail, name='translation-detail'),

    # Company setting masters
    path('company-setting-master-domains/', views.setting_domain_list_create, name='setting-domain-list-create'),
    path('company-setting-master-domains/<int:pk>/', views.setting_domain_detail, name='setting-domain-detail'),
    path(
        'company-setting-master-functionalities/', views.setting_functionality_list_create,
        name='setting-functionality-list-create',
    ),
    path(
        'company-setting-master-functionalities/<int:pk>/', views.setting_functionality_detail,
        name='setting-functionality-detail',
    ),
    path('company-settings-masters/', views.settings_master_list_create, name='settings-master-list-create'),
    path('company-settings-masters/<int:pk>/', views.settings_master_detail, name='settings-master-detail'),

    # Company settings
    path('company-settings/item/<int:pk>/', views.company_setting_detail, name='company-setting-detail'),
    path('company-settings/item/<int:pk>/dependents/', views.company_setting_dependents, name='company-setting-dependents'),
    path('company-settings/<str:domain_code>/', views.company_setting_domain_list, name='company-setting-domain-list'),
]
