from django.contrib import admin
from django.http import HttpResponse
from django.urls import path

from FitTrackApi.api import api


def health_check(request):
    return HttpResponse("OK")


urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", api.urls),
    path("kamal/up/", health_check),
]
