"""
URL configuration for the back-office project.

All API routes live under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Retail Back-Office Admin Panel"
admin.site.site_title = "Retail Back-Office Admin Portal"
admin.site.index_title = "Catalog administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backoffice.catalog.urls')),
]
