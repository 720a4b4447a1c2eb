from django.urls import path
from . import views

urlpatterns = [
    path('quotes/<int:pk>/quote-lines/', views.quote_line_list_create, name='quote-line-list-create'),
    path('quotes/<int:pk>/quote-lines/batch/', views.quote_line_batch, name='quote-line-batch'),
    path('quote-lines/<int:pk>/', views.quote_line_detail, name='quote-line-detail'),
]
