_TAG_PATTERNS = [
    (lambda p: p.startswith("/api/v1/attendance/clock-"), "Clock Engine"),
    (lambda p: p.startswith("/api/v1/attendance/geofence-check/"), "Clock Engine"),
    (lambda p: p.startswith("/api/v1/attendance/manual-entry/"), "Attendance Admin"),
    (
        lambda p: p.startswith("/api/v1/attendance/")
        and (p.endswith("/verify/") or p.endswith("/overtime/")),
        "Attendance Admin",
    ),
    (lambda p: p.startswith("/api/v1/attendance/"), "Attendance"),
    (lambda p: p == "/api/v1/schema/", "Meta"),
]


def group_attendance_tags(result, generator, request, public):
    """Collapse auto-generated tags into one group per attendance surface."""
    for path, operations in result.get("paths", {}).items():
        tag = None
        for pred, name in _TAG_PATTERNS:
            if pred(path):
                tag = name
                break
        if tag is None:
            continue
        for op in operations.values():
            op["tags"] = [tag]
    return result
