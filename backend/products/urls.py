from django.urls import path
from .views import unit_of_measure_list_create, unit_of_measure_detail

urlpatterns = [
    path('unit-of-measures/', unit_of_measure_list_create, name='unit-of-measure-list-create'),
    path('unit-of-measures/<int:pk>/', unit_of_measure_detail, name='unit-of-measure-detail'),
]
