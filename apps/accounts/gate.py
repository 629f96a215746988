# apps/accounts/gate.py
"""
بوابة الدخول: بعد نجاح تسجيل الدخول يجب أن يكون البريد ضمن قائمة
الشيوخ المسموح لهم، وإلا يُسجَّل خروج المستخدم فورًا.
"""
import logging
from functools import wraps

from django.conf import settings
from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.views import redirect_to_login
from django.shortcuts import redirect

logger = logging.getLogger(__name__)

REJECTION_MESSAGE = "هذا الحساب غير مصرح له باستخدام التطبيق. تواصل مع الإدارة."


def allowed_emails():
    return {e.strip().lower() for e in getattr(settings, "ALLOWED_TEACHER_EMAILS", []) if e.strip()}


def is_allowed_email(email):
    return bool(email) and email.strip().lower() in allowed_emails()


def is_allowed_user(user):
    return bool(user and user.is_authenticated and is_allowed_email(user.email))


def reject(request):
    """خروج فوري مع رسالة رفض."""
    logger.warning("sign-in rejected for %s", getattr(request.user, "email", ""))
    logout(request)
    messages.error(request, REJECTION_MESSAGE)


def allowed_teacher_required(view_func):
    """مثل login_required، مع فحص قائمة البريد المسموح به."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return redirect_to_login(request.get_full_path())
        if not is_allowed_user(request.user):
            reject(request)
            return redirect("accounts:login")
        return view_func(request, *args, **kwargs)
    return _wrapped
