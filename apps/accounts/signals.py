# apps/accounts/signals.py
from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile

User = get_user_model()


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    """
    إنشاء Profile لمرة واحدة عند إنشاء User جديد، مع الاسم والفوج
    من قائمة الشيوخ.
    """
    if created:
        profile, _ = Profile.objects.get_or_create(user=instance)
        if profile.fill_from_directory():
            profile.save(update_fields=["display_name", "group"])
