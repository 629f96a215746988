from django import forms
from django.contrib.auth.models import User

MIN_PASSWORD_LENGTH = 6


class LoginForm(forms.Form):
    email = forms.EmailField(label="البريد الإلكتروني")
    password = forms.CharField(widget=forms.PasswordInput, label="كلمة المرور")

    def clean_email(self):
        return self.cleaned_data["email"].strip().lower()


class SignupForm(forms.Form):
    email = forms.EmailField(label="البريد الإلكتروني")
    password1 = forms.CharField(widget=forms.PasswordInput, label="كلمة المرور")
    password2 = forms.CharField(widget=forms.PasswordInput, label="تأكيد كلمة المرور")

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("هذا البريد الإلكتروني مستخدم بالفعل.")
        return email

    def clean_password1(self):
        password = self.cleaned_data["password1"]
        if len(password) < MIN_PASSWORD_LENGTH:
            raise forms.ValidationError(
                f"كلمة المرور ضعيفة جدًا. يجب أن تتكون من {MIN_PASSWORD_LENGTH} أحرف على الأقل."
            )
        return password

    def clean(self):
        data = super().clean()
        if data.get("password1") and data.get("password1") != data.get("password2"):
            self.add_error("password2", "كلمتا المرور غير متطابقتين.")
        return data

    def save(self):
        email = self.cleaned_data["email"]
        return User.objects.create_user(
            username=email, email=email, password=self.cleaned_data["password1"]
        )
