from rest_framework import serializers

from hris.attendance.models import AttendanceSession
from hris.attendance.models import AttendanceVerification
from hris.attendance.models import VerificationStatus
from hris.employees.models import Employee
from hris.locations.models import Location


class AttendanceVerificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = AttendanceVerification
        fields = [
            "id",
            "status",
            "previous_status",
            "verified_by",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class AttendanceSessionSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    location_name = serializers.CharField(
        source="location.name", read_only=True, default=None
    )
    is_open = serializers.BooleanField(read_only=True)
    payable_overtime_minutes = serializers.IntegerField(read_only=True)

    class Meta:
        model = AttendanceSession
        fields = [
            "id",
            "employee",
            "employee_name",
            "location",
            "location_name",
            "time_in",
            "time_out",
            "is_open",
            "time_in_latitude",
            "time_in_longitude",
            "time_in_accuracy",
            "time_in_photo",
            "time_out_latitude",
            "time_out_longitude",
            "time_out_accuracy",
            "time_out_photo",
            "verification_status",
            "scheduled_shift_date",
            "actual_shift_type",
            "late_minutes",
            "late_deductible",
            "lunch_deduction_minutes",
            "total_working_minutes",
            "overtime_minutes",
            "is_overtime_session",
            "ot_status",
            "payable_overtime_minutes",
            "justification",
            "admin_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ScanCaptureSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    accuracy = serializers.FloatField(min_value=0, required=False, allow_null=True)
    photo = serializers.CharField(required=False, allow_blank=True, default="")


class ClockInSerializer(ScanCaptureSerializer):
    token = serializers.CharField()


class ClockOutSerializer(ScanCaptureSerializer):
    """Clock-out payload.

    The employee is taken from `token` (kiosk scan), from `employee`
    (admin/HR only) or from the requesting user, in that order. Coordinates
    are recorded but never checked.
    """

    token = serializers.CharField(required=False, allow_blank=True)
    employee = serializers.IntegerField(required=False)
    latitude = serializers.FloatField(
        min_value=-90, max_value=90, required=False, allow_null=True
    )
    longitude = serializers.FloatField(
        min_value=-180, max_value=180, required=False, allow_null=True
    )


class GeofenceCheckSerializer(serializers.Serializer):
    token = serializers.CharField()
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)


class GeofenceCheckResultSerializer(serializers.Serializer):
    matched = serializers.BooleanField()
    location = serializers.IntegerField(allow_null=True)
    location_name = serializers.CharField(allow_blank=True)
    distance_meters = serializers.FloatField(allow_null=True)
    nearest_location = serializers.IntegerField(allow_null=True)
    nearest_distance_meters = serializers.FloatField(allow_null=True)


class JustificationSerializer(serializers.Serializer):
    justification = serializers.CharField(max_length=2000)


class ManualEntrySerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.filter(is_deleted=False)
    )
    time_in = serializers.DateTimeField()
    time_out = serializers.DateTimeField(required=False, allow_null=True)
    location = serializers.PrimaryKeyRelatedField(
        queryset=Location.objects.all(), required=False, allow_null=True
    )
    verification_status = serializers.ChoiceField(
        choices=VerificationStatus.choices, default=VerificationStatus.PENDING
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        time_out = attrs.get("time_out")
        if time_out is not None and time_out <= attrs["time_in"]:
            raise serializers.ValidationError(
                {"time_out": "Clock-out must be after clock-in."}
            )
        if (
            attrs["verification_status"] == VerificationStatus.VERIFIED
            and attrs.get("location") is None
        ):
            raise serializers.ValidationError(
                {"location": "required for a Verified entry."}
            )
        return attrs


class VerificationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=VerificationStatus.choices)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class OvertimeDecisionSerializer(serializers.Serializer):
    approve = serializers.BooleanField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class SummaryQuerySerializer(serializers.Serializer):
    employee = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError(
                {"end_date": "end_date cannot be before start_date."}
            )
        return attrs


class AttendanceSummarySerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    scheduled_work_days = serializers.IntegerField()
    days_present = serializers.IntegerField()
    days_absent = serializers.IntegerField()
    total_working_minutes = serializers.IntegerField()
    total_late_minutes = serializers.IntegerField()
    deductible_late_count = serializers.IntegerField()
    approved_overtime_minutes = serializers.IntegerField()
    pending_overtime_minutes = serializers.IntegerField()
    verified_sessions = serializers.IntegerField()
    flagged_sessions = serializers.IntegerField()
