from django.conf import settings
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from hris.attendance.api.views import AttendanceViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("attendance", AttendanceViewSet, basename="attendance")


app_name = "api"
urlpatterns = router.urls
