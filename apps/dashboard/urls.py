from django.urls import re_path

from . import views

app_name = 'dashboard'

# Mounted without a trailing slash; each route takes an optional one
urlpatterns = [
    re_path(r'^/?$', views.DashboardView.as_view(), name='home'),
    re_path(r'^/admin/?$', views.AdminDashboardView.as_view(), name='admin'),
    re_path(r'^/guide/?$', views.GuideDashboardView.as_view(), name='guide'),
    re_path(r'^/tourist/?$', views.TouristDashboardView.as_view(), name='tourist'),
]
