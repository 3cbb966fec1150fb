"""Bilingual (Arabic / English) messages for working hours validation and reconciliation."""

from app.utils.working_hours import BilingualMessage

DAY_NAMES = {
    "monday": {"ar": "الاثنين", "en": "Monday"},
    "tuesday": {"ar": "الثلاثاء", "en": "Tuesday"},
    "wednesday": {"ar": "الأربعاء", "en": "Wednesday"},
    "thursday": {"ar": "الخميس", "en": "Thursday"},
    "friday": {"ar": "الجمعة", "en": "Friday"},
    "saturday": {"ar": "السبت", "en": "Saturday"},
    "sunday": {"ar": "الأحد", "en": "Sunday"},
}

ENTITY_NAMES = {
    "organization": {"ar": "المؤسسة", "en": "organization"},
    "complex": {"ar": "المجمع", "en": "complex"},
    "clinic": {"ar": "العيادة", "en": "clinic"},
    "user": {"ar": "الطبيب", "en": "doctor"},
}


def day_name(day: str, language: str) -> str:
    return DAY_NAMES.get(day.lower(), {}).get(language, day)


def entity_name(entity_type: str, language: str) -> str:
    return ENTITY_NAMES.get(entity_type, {}).get(language, entity_type)


def msg(ar: str, en: str) -> BilingualMessage:
    return BilingualMessage(ar=ar, en=en)


# ---------------------------------------------------------------------------
# Interval validation
# ---------------------------------------------------------------------------


def invalid_day(day: str) -> BilingualMessage:
    return msg(f"يوم غير صالح: {day}", f"Invalid day: {day}")


def missing_times(day: str) -> BilingualMessage:
    return msg(
        f"وقت الفتح ووقت الإغلاق مطلوبان ليوم العمل {day_name(day, 'ar')}",
        f"Opening and closing times are required for working day {day_name(day, 'en')}",
    )


def invalid_time_format(day: str, field: str, value: str) -> BilingualMessage:
    return msg(
        f"صيغة الوقت غير صالحة ({field}) ليوم {day_name(day, 'ar')}: {value}. الصيغة المطلوبة HH:MM",
        f"Invalid {field} format for {day_name(day, 'en')}: {value}. Expected HH:MM",
    )


def closing_not_after_opening(day: str, opening: str, closing: str) -> BilingualMessage:
    return msg(
        f"وقت الإغلاق ({closing}) يجب أن يكون بعد وقت الفتح ({opening}) يوم {day_name(day, 'ar')}",
        f"Closing time ({closing}) must be after opening time ({opening}) on {day_name(day, 'en')}",
    )


def break_incomplete(day: str) -> BilingualMessage:
    return msg(
        f"يجب تحديد بداية ونهاية الاستراحة معاً يوم {day_name(day, 'ar')}",
        f"Break start and end times must both be provided on {day_name(day, 'en')}",
    )


def break_end_not_after_start(day: str, start: str, end: str) -> BilingualMessage:
    return msg(
        f"نهاية الاستراحة ({end}) يجب أن تكون بعد بدايتها ({start}) يوم {day_name(day, 'ar')}",
        f"Break end time ({end}) must be after break start time ({start}) on {day_name(day, 'en')}",
    )


def break_outside_hours(day: str, opening: str, closing: str) -> BilingualMessage:
    return msg(
        f"يجب أن تكون الاستراحة ضمن ساعات العمل ({opening} - {closing}) يوم {day_name(day, 'ar')}",
        f"Break must fall within working hours ({opening} - {closing}) on {day_name(day, 'en')}",
    )


def duplicate_day(day: str) -> BilingualMessage:
    return msg(f"اليوم مكرر في الجدول: {day_name(day, 'ar')}", f"Duplicate day in schedule: {day_name(day, 'en')}")


def missing_day(day: str) -> BilingualMessage:
    return msg(f"اليوم مفقود من الجدول: {day_name(day, 'ar')}", f"Day missing from schedule: {day_name(day, 'en')}")


# ---------------------------------------------------------------------------
# Containment
# ---------------------------------------------------------------------------


def child_open_parent_closed(child_name: str, parent_type: str, day: str) -> BilingualMessage:
    return msg(
        f"لا يمكن أن يعمل {child_name} يوم {day_name(day, 'ar')} لأن {entity_name(parent_type, 'ar')} مغلق في هذا اليوم",
        f"{child_name} cannot be open on {day_name(day, 'en')} because the parent "
        f"{entity_name(parent_type, 'en')} is closed that day",
    )


def opening_before_parent(parent_type: str, opening: str, parent_opening: str) -> BilingualMessage:
    return msg(
        f"ساعات العمل يجب أن تكون ضمن ساعات {entity_name(parent_type, 'ar')}. "
        f"وقت الفتح ({opening}) يجب أن يكون في أو بعد {parent_opening}",
        f"Working hours must be within {entity_name(parent_type, 'en')} hours. "
        f"Opening time ({opening}) must be at or after {parent_opening}",
    )


def closing_after_parent(parent_type: str, closing: str, parent_closing: str) -> BilingualMessage:
    return msg(
        f"ساعات العمل يجب أن تكون ضمن ساعات {entity_name(parent_type, 'ar')}. "
        f"وقت الإغلاق ({closing}) يجب أن يكون في أو قبل {parent_closing}",
        f"Working hours must be within {entity_name(parent_type, 'en')} hours. "
        f"Closing time ({closing}) must be at or before {parent_closing}",
    )


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------


def conflict_closed_day(day: str) -> BilingualMessage:
    return msg(
        f"الموعد في يوم {day_name(day, 'ar')} والذي لم يعد يوم عمل",
        f"Appointment is on {day_name(day, 'en')} which is no longer a working day",
    )


def conflict_before_opening(appointment_time: str, opening: str) -> BilingualMessage:
    return msg(
        f"الموعد في {appointment_time} قبل وقت الفتح الجديد {opening}",
        f"Appointment at {appointment_time} is before new opening time {opening}",
    )


def conflict_after_closing(appointment_time: str, closing: str) -> BilingualMessage:
    return msg(
        f"الموعد في {appointment_time} خارج ساعات العمل الجديدة (الإغلاق {closing})",
        f"Appointment at {appointment_time} is outside new hours (closing time {closing})",
    )


def conflict_inside_break(break_start: str, break_end: str) -> BilingualMessage:
    return msg(
        f"الموعد يتعارض مع وقت الاستراحة ({break_start} - {break_end})",
        f"Appointment conflicts with break time ({break_start} - {break_end})",
    )


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------

SCHEDULE_INVALID = msg("فشل التحقق من ساعات العمل", "Working hours validation failed")
SCHEDULE_UPDATED = msg("تم تحديث ساعات العمل بنجاح", "Working hours updated successfully")
SCHEDULE_CONFLICTS = msg(
    "ساعات العمل الجديدة تتعارض مع مواعيد قائمة",
    "New working hours conflict with existing appointments",
)
TRANSACTION_FAILED = msg(
    "فشل تحديث ساعات العمل ولم يتم حفظ أي تغييرات",
    "Working hours update failed and no changes were saved",
)
TRANSACTION_RETRY = msg(
    "انتهت مهلة العملية ولم يتم حفظ أي تغييرات، يرجى المحاولة مرة أخرى",
    "The operation timed out and no changes were saved, please retry",
)


def entity_not_found(entity_type: str, entity_id) -> BilingualMessage:
    return msg(
        f"{entity_name(entity_type, 'ar')} غير موجود ({entity_id})",
        f"{entity_name(entity_type, 'en').capitalize()} not found ({entity_id})",
    )


def invalid_entity_type(entity_type: str) -> BilingualMessage:
    return msg(f"نوع الكيان غير صالح: {entity_type}", f"Invalid entity type: {entity_type}")


def malformed_parent_reference(entity_type: str, field: str) -> BilingualMessage:
    return msg(
        f"مرجع الكيان الأب غير صالح ({field}) في {entity_name(entity_type, 'ar')}",
        f"Malformed parent reference ({field}) on {entity_name(entity_type, 'en')}",
    )


def invalid_role(role: str, parent_type: str) -> BilingualMessage:
    return msg(
        f"الدور {role} لا يمكنه الحصول على اقتراحات من {entity_name(parent_type, 'ar')}",
        f"Role {role} cannot take suggestions from a {entity_name(parent_type, 'en')}",
    )


def hours_not_found(entity_type: str) -> BilingualMessage:
    return msg(
        f"لم يتم العثور على ساعات عمل لـ{entity_name(entity_type, 'ar')}",
        f"No working hours found for {entity_name(entity_type, 'en')}",
    )


# ---------------------------------------------------------------------------
# Patient notifications, keyed by kind
# ---------------------------------------------------------------------------

NOTIFICATION_TEMPLATES = {
    "appointment_needs_rescheduling": {
        "title": {"ar": "الموعد يحتاج إعادة جدولة", "en": "Appointment Requires Rescheduling"},
        "body": {
            "ar": "موعدك {service}في {date} الساعة {time} يحتاج إعادة جدولة بسبب تغيير ساعات العمل. سيتواصل معك فريقنا لتحديد موعد جديد.",
            "en": "Your {service}appointment on {date} at {time} needs to be rescheduled due to a working hours change. Our team will contact you to pick a new time.",
        },
    },
    "appointment_hours_changed": {
        "title": {"ar": "تغيير في ساعات العمل", "en": "Working Hours Changed"},
        "body": {
            "ar": "موعدك {service}في {date} الساعة {time} أصبح خارج ساعات العمل الجديدة. يرجى الاتصال بنا لتأكيده أو تغييره.",
            "en": "Your {service}appointment on {date} at {time} is now outside the new working hours. Please contact us to confirm or change it.",
        },
    },
    "appointment_cancelled": {
        "title": {"ar": "تم إلغاء الموعد", "en": "Appointment Cancelled"},
        "body": {
            "ar": "تم إلغاء موعدك {service}في {date} الساعة {time} بسبب تغيير ساعات العمل. يرجى الاتصال بنا لحجز موعد جديد.",
            "en": "Your {service}appointment on {date} at {time} has been cancelled due to a working hours change. Please contact us to book a new appointment.",
        },
    },
}


def notification_content(kind: str, language: str, appointment_details: dict) -> tuple:
    """Render (title, body) for a notification kind in the given language."""
    template = NOTIFICATION_TEMPLATES[kind]
    lang = language if language in ("ar", "en") else "en"
    service = appointment_details.get("service_name")
    body = template["body"][lang].format(
        service=f"{service} " if service else "",
        date=appointment_details.get("appointment_date", ""),
        time=appointment_details.get("appointment_time", ""),
    )
    return template["title"][lang], body


def invalid_conflict_strategy(strategy: str) -> BilingualMessage:
    return msg(
        f"طريقة معالجة التعارض غير صالحة: {strategy}. القيم المسموحة: reschedule, notify, cancel",
        f"Invalid conflict handling strategy: {strategy}. Allowed: reschedule, notify, cancel",
    )
