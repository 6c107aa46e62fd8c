from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Django Admin
    path('admin/', admin.site.urls),

    # REST API
    path('api/', include('api.urls')),
]

handler404 = 'api.views.handler404'
