# apps/accounts/views.py
import logging

from django.contrib import messages
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from .forms import LoginForm, SignupForm
from .gate import is_allowed_user, reject

logger = logging.getLogger(__name__)

User = get_user_model()


def login_view(request):
    """تسجيل الدخول بالبريد وكلمة المرور، ثم فحص قائمة الشيوخ المسموح لهم."""
    if request.user.is_authenticated and is_allowed_user(request.user):
        return redirect("tracker:students")

    form = LoginForm(request.POST or None)
    if request.method == "POST":
        if not form.is_valid():
            messages.error(request, "من فضلك أدخل البريد الإلكتروني وكلمة المرور.")
            return render(request, "accounts/login.html", {"form": form})

        email = form.cleaned_data["email"]
        user_obj = User.objects.filter(email__iexact=email).first()
        user = None
        if user_obj is not None:
            user = authenticate(request, username=user_obj.get_username(),
                                password=form.cleaned_data["password"])
        if user is None:
            messages.error(request, "البريد الإلكتروني أو كلمة المرور غير صحيحة.")
            return render(request, "accounts/login.html", {"form": form})

        login(request, user)
        if not is_allowed_user(user):
            reject(request)
            return redirect("accounts:login")

        logger.info("teacher signed in: %s", user.email)
        next_url = request.GET.get("next")
        if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
            return redirect(next_url)
        return redirect("tracker:students")

    return render(request, "accounts/login.html", {"form": form})


def signup_view(request):
    form = SignupForm(request.POST or None)
    if request.method == "POST":
        if not form.is_valid():
            for errors in form.errors.values():
                for error in errors:
                    messages.error(request, error)
            return render(request, "accounts/signup.html", {"form": form})

        user = form.save()
        logger.info("account created: %s", user.email)
        login(request, user)
        if not is_allowed_user(user):
            reject(request)
            return redirect("accounts:login")
        messages.success(request, "تم إنشاء الحساب بنجاح.")
        return redirect("tracker:students")

    return render(request, "accounts/signup.html", {"form": form})


def logout_view(request):
    logout(request)
    messages.success(request, "تم تسجيل الخروج.")
    return redirect("accounts:login")
