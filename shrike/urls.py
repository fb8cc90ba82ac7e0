from django.urls import path

from shrike.views import gateway

app_name = "shrike"

urlpatterns = [
    path("status", gateway.status, name="status"),
    path("sync", gateway.sync, name="sync"),
]
