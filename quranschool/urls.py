# quranschool/urls.py
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='tracker:students', permanent=False), name='home'),

    path('admin/', admin.site.urls),

    # Auth / teacher profile
    path('accounts/', include(('apps.accounts.urls', 'accounts'), namespace='accounts')),

    # Students, sessions, progress, ranking, reports
    path('', include(('apps.tracker.urls', 'tracker'), namespace='tracker')),
]

# خدمة ملفات الميديا محليًا أثناء التطوير
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
