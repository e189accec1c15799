from django.urls import path, include

urlpatterns = [
    path('auth/', include('apps.authentication.urls')),
    path('users/', include('apps.users.urls')),
    path('companies/', include('apps.companies.urls')),
    path('master-data/', include('apps.master_data.urls')),
    path('references/', include('apps.references.urls')),
    path('documents/', include('apps.documents.urls')),
    path('', include('apps.permissions.urls')),
]
