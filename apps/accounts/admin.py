from django.contrib import admin

from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "display_name", "group", "email")
    search_fields = ("user__username", "user__email", "display_name")

    def email(self, obj):
        return obj.user.email
    email.short_description = "البريد الإلكتروني"
