import datetime as dt

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import OpenApiTypes
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from hris.attendance import selectors
from hris.attendance import services
from hris.attendance.api.filters import AttendanceSessionFilter
from hris.attendance.api.serializers import AttendanceSessionSerializer
from hris.attendance.api.serializers import AttendanceSummarySerializer
from hris.attendance.api.serializers import AttendanceVerificationSerializer
from hris.attendance.api.serializers import ClockInSerializer
from hris.attendance.api.serializers import ClockOutSerializer
from hris.attendance.api.serializers import GeofenceCheckResultSerializer
from hris.attendance.api.serializers import GeofenceCheckSerializer
from hris.attendance.api.serializers import JustificationSerializer
from hris.attendance.api.serializers import ManualEntrySerializer
from hris.attendance.api.serializers import OvertimeDecisionSerializer
from hris.attendance.api.serializers import SummaryQuerySerializer
from hris.attendance.api.serializers import VerificationStatusSerializer
from hris.attendance.exceptions import AttendanceError
from hris.attendance.exceptions import SessionNotFound
from hris.attendance.exceptions import UnknownToken
from hris.attendance.models import AttendanceSession
from hris.employees.models import Employee
from hris.employees.permissions import IsAdminOrHR
from hris.employees.permissions import is_admin_or_hr
from hris.employees.services import get_by_scan_token

ADMIN_ACTIONS = {"manual_entry", "verify", "overtime"}


def _error_response(exc: AttendanceError) -> Response:
    return Response(exc.as_payload(), status=exc.status_code)


def _forbidden() -> Response:
    return Response(
        {"detail": "Forbidden", "code": "FORBIDDEN"},
        status=status.HTTP_403_FORBIDDEN,
    )


@extend_schema_view(
    list=extend_schema(tags=["Attendance"]),
    retrieve=extend_schema(tags=["Attendance"]),
)
class AttendanceViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    """Attendance sessions and the clock engine endpoints.

    Admin/HR see every session; other users see their own employee's only.
    """

    queryset = AttendanceSession.objects.select_related("employee", "location")
    serializer_class = AttendanceSessionSerializer
    permission_classes = [IsAuthenticated]
    filterset_class = AttendanceSessionFilter

    def get_permissions(self):
        if getattr(self, "action", None) in ADMIN_ACTIONS:
            return [IsAuthenticated(), IsAdminOrHR()]
        return super().get_permissions()

    def _scoped(self, qs):
        user = self.request.user
        if is_admin_or_hr(user):
            return qs
        employee = getattr(user, "employee", None)
        if employee is None:
            return qs.none()
        return qs.filter(employee=employee)

    def get_queryset(self):
        return self._scoped(super().get_queryset())

    def _own_employee_id(self):
        employee = getattr(self.request.user, "employee", None)
        return getattr(employee, "pk", None)

    @action(detail=False, methods=["post"], url_path="clock-in")
    @extend_schema(
        tags=["Clock Engine"],
        request=ClockInSerializer,
        responses={201: AttendanceSessionSerializer},
        description=(
            "Scan a badge token at a location. Creates a Verified session when "
            "the coordinates fall inside an assigned geofence; otherwise "
            "nothing is stored."
        ),
    )
    def clock_in(self, request):
        ser = ClockInSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vd = ser.validated_data
        try:
            session = services.clock_in(
                vd["token"],
                vd["latitude"],
                vd["longitude"],
                vd.get("accuracy"),
                vd.get("photo", ""),
            )
        except AttendanceError as exc:
            return _error_response(exc)
        return Response(
            AttendanceSessionSerializer(session).data,
            status=status.HTTP_201_CREATED,
        )

    def _resolve_clock_out_employee(self, vd):
        """Return (employee_id, error_response)."""
        token = vd.get("token")
        if token:
            employee = get_by_scan_token(token)
            if employee is None:
                return None, _error_response(UnknownToken())
            return employee.pk, None
        requested = vd.get("employee")
        own = self._own_employee_id()
        if requested is not None and requested != own:
            if not is_admin_or_hr(self.request.user):
                return None, _forbidden()
            return requested, None
        if own is None:
            return None, Response(
                {"employee": "required"}, status=status.HTTP_400_BAD_REQUEST
            )
        return own, None

    @action(detail=False, methods=["post"], url_path="clock-out")
    @extend_schema(
        tags=["Clock Engine"],
        request=ClockOutSerializer,
        responses=AttendanceSessionSerializer,
        description="Close the employee's open session and compute its minutes.",
    )
    def clock_out(self, request):
        ser = ClockOutSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vd = ser.validated_data
        employee_id, error = self._resolve_clock_out_employee(vd)
        if error:
            return error
        try:
            session = services.clock_out(
                employee_id,
                vd.get("latitude"),
                vd.get("longitude"),
                vd.get("accuracy"),
                vd.get("photo", ""),
            )
        except AttendanceError as exc:
            return _error_response(exc)
        return Response(AttendanceSessionSerializer(session).data)

    @action(detail=True, methods=["post"], url_path="justification")
    @extend_schema(
        tags=["Clock Engine"],
        request=JustificationSerializer,
        responses=AttendanceSessionSerializer,
    )
    def justification(self, request, pk=None):
        """Attach an explanation to a session (owner or admin/HR)."""

        ser = JustificationSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        # Sessions outside the caller's scope look the same as missing ones.
        if not self.get_queryset().filter(pk=pk).exists():
            return _error_response(SessionNotFound(session=pk))
        try:
            session = services.submit_justification(
                pk, ser.validated_data["justification"]
            )
        except AttendanceError as exc:
            return _error_response(exc)
        return Response(AttendanceSessionSerializer(session).data)

    @action(detail=False, methods=["post"], url_path="geofence-check")
    @extend_schema(
        tags=["Clock Engine"],
        request=GeofenceCheckSerializer,
        responses=GeofenceCheckResultSerializer,
        description="Report the matching or nearest location without clocking in.",
    )
    def geofence_check(self, request):
        ser = GeofenceCheckSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vd = ser.validated_data
        try:
            match = services.geofence_diagnostics(
                vd["token"], vd["latitude"], vd["longitude"]
            )
        except AttendanceError as exc:
            return _error_response(exc)
        nearest_distance = match.nearest_distance_meters
        data = {
            "matched": match.matched,
            "location": getattr(match.location, "pk", None),
            "location_name": getattr(match.location, "name", ""),
            "distance_meters": (
                round(match.distance_meters, 1)
                if match.distance_meters is not None
                else None
            ),
            "nearest_location": getattr(match.nearest, "pk", None),
            "nearest_distance_meters": (
                round(nearest_distance, 1) if nearest_distance is not None else None
            ),
        }
        return Response(GeofenceCheckResultSerializer(data).data)

    @action(detail=False, methods=["get"], url_path="today")
    @extend_schema(
        tags=["Attendance"],
        responses=AttendanceSessionSerializer(many=True),
        description="Sessions on today's scheduled shift date (operating timezone).",
    )
    def today(self, request):
        qs = self._scoped(selectors.today_sessions())
        return Response(AttendanceSessionSerializer(qs, many=True).data)

    @action(detail=False, methods=["get"], url_path="summary")
    @extend_schema(
        tags=["Attendance"],
        parameters=[
            OpenApiParameter(
                name="employee",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Employee ID (admin/HR only; defaults to self)",
            ),
            OpenApiParameter(
                name="start_date",
                type=OpenApiTypes.DATE,
                location=OpenApiParameter.QUERY,
                required=False,
                description="First shift date (default: first day of month)",
            ),
            OpenApiParameter(
                name="end_date",
                type=OpenApiTypes.DATE,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Last shift date, inclusive (default: today)",
            ),
        ],
        responses=AttendanceSummarySerializer,
    )
    def summary(self, request):
        """Payroll totals for one employee over a shift-date range."""

        ser = SummaryQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        vd = ser.validated_data

        own = self._own_employee_id()
        employee_id = vd.get("employee") or own
        if employee_id is None:
            return Response(
                {"employee": "required"}, status=status.HTTP_400_BAD_REQUEST
            )
        if employee_id != own and not is_admin_or_hr(request.user):
            return _forbidden()
        employee = get_object_or_404(Employee, pk=employee_id, is_deleted=False)

        today = selectors.operating_today()
        end_date = vd.get("end_date") or today
        start_date = vd.get("start_date") or dt.date(end_date.year, end_date.month, 1)
        if end_date < start_date:
            return Response(
                {"end_date": "end_date cannot be before start_date."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        result = selectors.summarize(employee, start_date, end_date)
        return Response(AttendanceSummarySerializer(result.as_dict()).data)

    @action(detail=False, methods=["post"], url_path="manual-entry")
    @extend_schema(
        tags=["Attendance Admin"],
        request=ManualEntrySerializer,
        responses={201: AttendanceSessionSerializer},
        description=(
            "Administrative entry that bypasses the geofence. Still refused "
            "while the employee has an open session."
        ),
    )
    def manual_entry(self, request):
        ser = ManualEntrySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vd = ser.validated_data
        try:
            session = services.record_manual_entry(
                vd["employee"],
                vd["time_in"],
                vd.get("time_out"),
                location=vd.get("location"),
                verification_status=vd["verification_status"],
                notes=vd.get("notes", ""),
                actor=request.user,
            )
        except AttendanceError as exc:
            return _error_response(exc)
        return Response(
            AttendanceSessionSerializer(session).data,
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"], url_path="verify")
    @extend_schema(
        tags=["Attendance Admin"],
        request=VerificationStatusSerializer,
        responses=AttendanceSessionSerializer,
    )
    def verify(self, request, pk=None):
        """Re-flag a session's verification status."""

        session = self.get_object()
        ser = VerificationStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            session = services.set_verification_status(
                session,
                ser.validated_data["status"],
                actor=request.user,
                notes=ser.validated_data.get("notes", ""),
            )
        except AttendanceError as exc:
            return _error_response(exc)
        return Response(AttendanceSessionSerializer(session).data)

    @action(detail=True, methods=["get"], url_path="verifications")
    @extend_schema(
        tags=["Attendance"],
        responses=AttendanceVerificationSerializer(many=True),
    )
    def verifications(self, request, pk=None):
        session = self.get_object()
        return Response(
            AttendanceVerificationSerializer(
                session.verifications.all(), many=True
            ).data
        )

    @action(detail=True, methods=["post"], url_path="overtime")
    @extend_schema(
        tags=["Attendance Admin"],
        request=OvertimeDecisionSerializer,
        responses=AttendanceSessionSerializer,
    )
    def overtime(self, request, pk=None):
        """Approve or reject pending overtime."""

        session = self.get_object()
        ser = OvertimeDecisionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            session = services.decide_overtime(
                session,
                ser.validated_data["approve"],
                actor=request.user,
                notes=ser.validated_data.get("notes", ""),
            )
        except AttendanceError as exc:
            return _error_response(exc)
        return Response(AttendanceSessionSerializer(session).data)
