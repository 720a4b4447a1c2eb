from django.urls import path
from .views import account_search, account_children, account_parents, account_quotes, account_assets

urlpatterns = [
    path('accounts/search/', account_search, name='account-search'),
    path('accounts/<int:pk>/children/', account_children, name='account-children'),
    path('accounts/<int:pk>/parents/', account_parents, name='account-parents'),
    path('accounts/<int:pk>/quotes/', account_quotes, name='account-quotes'),
    path('accounts/<int:pk>/assets/', account_assets, name='account-assets'),
]
