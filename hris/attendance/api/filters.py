import django_filters

from hris.attendance.models import AttendanceSession
from hris.attendance.models import OvertimeStatus
from hris.attendance.models import VerificationStatus


class AttendanceSessionFilter(django_filters.FilterSet):
    employee = django_filters.NumberFilter(field_name="employee__id")
    location = django_filters.NumberFilter(field_name="location__id")
    verification_status = django_filters.ChoiceFilter(
        choices=VerificationStatus.choices
    )
    ot_status = django_filters.ChoiceFilter(choices=OvertimeStatus.choices)
    start_date = django_filters.DateFilter(
        field_name="scheduled_shift_date", lookup_expr="gte"
    )
    end_date = django_filters.DateFilter(
        field_name="scheduled_shift_date", lookup_expr="lte"
    )
    is_open = django_filters.BooleanFilter(field_name="time_out", lookup_expr="isnull")

    class Meta:
        model = AttendanceSession
        fields = [
            "employee",
            "location",
            "verification_status",
            "ot_status",
            "start_date",
            "end_date",
            "is_open",
            "is_overtime_session",
        ]
