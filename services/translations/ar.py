# -*- coding: utf-8 -*-
"""Arabic translations."""

AR_TRANSLATIONS = {
    # Dialogs
    "dialog.error": "خطأ",
    "dialog.warning": "تحذير",
    "dialog.success": "نجاح",

    # Buttons
    "button.next": "التالي",
    "button.back": "السابق",
    "button.submit": "إرسال",
    "button.retry": "إعادة المحاولة",
    "button.cancel": "إلغاء",

    # Wizard
    "wizard.step_of": "الخطوة {current} من {total}",
    "wizard.submitting": "جارٍ الإرسال...",
    "wizard.retrying": "فشل الإرسال. إعادة المحاولة خلال {seconds} ثانية (المحاولة {attempt} من {max_attempts})...",
    "wizard.succeeded": "تم الإرسال بنجاح",
    "wizard.cancelled": "تم إغلاق النموذج قبل اكتماله",
    "wizard.step_blocked": "يرجى تصحيح الحقول المحددة قبل المتابعة",
    "wizard.step_not_visited": "لا يمكن فتح هذه الخطوة بعد",
    "wizard.busy": "يرجى الانتظار حتى تنتهي العملية الحالية",

    # Submission errors
    "error.submit.conflict": "يتعارض هذا الإرسال مع سجل موجود.",
    "error.submit.rejected": "تم رفض الإرسال:\n{details}",
    "error.submit.rejected_generic": "تم رفض الإرسال. يرجى مراجعة إجاباتك.",
    "error.submit.unauthorized": "غير مصرح لك بإرسال هذا النموذج. يرجى تسجيل الدخول مرة أخرى.",
    "error.submit.timeout": "استغرق الخادم وقتًا طويلاً للرد.",
    "error.submit.unavailable": "الخدمة غير متاحة مؤقتًا.",
    "error.submit.retries_exhausted": "{reason}\nتوقفت المحاولات بعد {attempts} محاولات. يمكنك المحاولة مرة أخرى.",
    "error.submit.unknown": "حدث خطأ غير متوقع. يرجى المحاولة مرة أخرى.",

    # Validation Messages
    "validation.field_required": "الحقل '{field}' مطلوب",
    "validation.invalid_format": "صيغة الحقل '{field}' غير صحيحة",
    "validation.check_data": "يرجى التحقق من البيانات المدخلة",
}
