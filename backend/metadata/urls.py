from django.urls import path
from .views import (
    object_field_list_create, object_field_types, object_field_defaults, object_field_detail,
    layout_resolve, layout_list_create, layout_detail
)

urlpatterns = [
    # Field metadata endpoints
    path('object-fields/<str:object_code>/', object_field_list_create, name='object-field-list-create'),
    path('object-fields/<str:object_code>/types/', object_field_types, name='object-field-types'),
    path('object-fields/<str:object_code>/defaults/', object_field_defaults, name='object-field-defaults'),
    path('object-fields/<str:object_code>/<str:api_code>/', object_field_detail, name='object-field-detail'),

    # Layout endpoints
    path('layouts/', layout_list_create, name='layout-list-create'),
    path('layouts/<int:pk>/', layout_detail, name='layout-detail'),
    path('layouts/<str:object_code>/<str:view_type>/', layout_resolve, name='layout-resolve'),
]
