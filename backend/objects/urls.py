from django.urls import path
from .views import object_list_create, object_detail, object_render, object_new_render, object_table

urlpatterns = [
    path('<str:object_code>/', object_list_create, name='object-list-create'),
    path('<str:object_code>/table/', object_table, name='object-table'),
    path('<str:object_code>/new/render/', object_new_render, name='object-new-render'),
    path('<str:object_code>/<int:pk>/', object_detail, name='object-detail'),
    path('<str:object_code>/<int:pk>/render/', object_render, name='object-render'),
]
