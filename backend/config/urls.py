"""
URL configuration for the CRM backend project.

Business-object specific routes are included first; the generic object routes
(``<object_code>/`` and ``<object_code>/<pk>/``) come last so that every
specific path wins over the catch-all object code.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "CRM Administration"
admin.site.site_title = "CRM Admin Portal"
admin.site.index_title = "Welcome to the CRM Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.setup.urls')),
    path('api/v1/', include('backend.metadata.urls')),
    path('api/v1/', include('backend.accounts.urls')),
    path('api/v1/', include('backend.products.urls')),
    path('api/v1/', include('backend.quotes.urls')),
    path('api/v1/', include('backend.objects.urls')),
]
