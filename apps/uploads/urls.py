from django.urls import re_path

from . import views

app_name = 'uploads'

urlpatterns = [
    re_path(r'^/single/?$', views.SingleUploadView.as_view(), name='single'),
    re_path(r'^/multiple/?$', views.MultipleUploadView.as_view(), name='multiple'),
    re_path(r'^/?$', views.DeleteUploadView.as_view(), name='delete'),
]
