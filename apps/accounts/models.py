from django.conf import settings
from django.contrib.auth.models import User
from django.db import models


class Profile(models.Model):
    """بروفايل الشيخ: الاسم المعروض والفوج الذي يشرف عليه."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    display_name = models.CharField("الاسم", max_length=150, blank=True, default="")
    group = models.CharField("الفوج", max_length=50, blank=True, default="")

    def __str__(self):
        return self.display_name or self.user.get_username()

    def fill_from_directory(self):
        """يملأ الاسم والفوج من قائمة الشيوخ في الإعدادات إن وُجد البريد فيها."""
        entry = getattr(settings, "TEACHER_DIRECTORY", {}).get((self.user.email or "").lower())
        if entry:
            self.display_name = self.display_name or entry.get("name", "")
            self.group = self.group or entry.get("group", "")
        return entry is not None
