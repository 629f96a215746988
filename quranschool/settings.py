# quranschool/settings.py
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / '.env')

SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-me')
DEBUG = os.getenv('DEBUG', '1') == '1'
ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', '127.0.0.1,localhost,testserver').split(',')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    # local apps
    'apps.accounts.apps.AccountsConfig',
    'apps.tracker.apps.TrackerConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'quranschool.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# من Django 4+ لازم البروتوكول يكون واضح (https://)
CSRF_TRUSTED_ORIGINS = [
    origin for origin in os.getenv('CSRF_TRUSTED_ORIGINS', '').split(',') if origin
]

if not DEBUG:
    CSRF_COOKIE_SECURE = True
    SESSION_COOKIE_SECURE = True
    # لو السيرفر وراه بروكسي
    SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

WSGI_APPLICATION = 'quranschool.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
        'OPTIONS': {'min_length': 6},
    },
]

LANGUAGE_CODE = 'ar'
TIME_ZONE = os.getenv('TIME_ZONE', 'Africa/Algiers')
USE_I18N = True
USE_TZ = True

# STATIC
STATIC_URL = 'static/'
STATICFILES_DIRS = [BASE_DIR / 'static']
STATIC_ROOT = BASE_DIR / 'staticfiles'

# MEDIA (صور التقارير اليومية)
MEDIA_URL = '/media/'
MEDIA_ROOT = BASE_DIR / 'media'

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
        "OPTIONS": {
            "location": MEDIA_ROOT,
            "base_url": MEDIA_URL,
        },
    },
    "staticfiles": {
        "BACKEND": os.getenv(
            'STATICFILES_BACKEND',
            "whitenoise.storage.CompressedManifestStaticFilesStorage" if not DEBUG
            else "django.contrib.staticfiles.storage.StaticFilesStorage",
        ),
    },
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'quranschool',
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Auth redirects
LOGIN_URL = 'accounts:login'
LOGIN_REDIRECT_URL = 'tracker:students'
LOGOUT_REDIRECT_URL = 'accounts:login'

# ==============================================================================
# بوابة الدخول: البريد الإلكتروني للمشايخ المسموح لهم فقط
# ==============================================================================
ALLOWED_TEACHER_EMAILS = [
    email.strip().lower()
    for email in os.getenv(
        'ALLOWED_TEACHER_EMAILS',
        'admin1@gmail.com,admin2@gmail.com,admin3@gmail.com',
    ).split(',')
    if email.strip()
]

# الاسم والفوج لكل شيخ (يُستخدم عند إنشاء الحساب)
TEACHER_DIRECTORY = {
    "admin1@gmail.com": {"name": "الشيخ صهيب نصيب", "group": "فوج 1"},
    "admin2@gmail.com": {"name": "الشيخ زياد درويش", "group": "فوج 2"},
    "admin3@gmail.com": {"name": "الشيخ فؤاد بن عمر", "group": "فوج 3"},
}

# اتجاه الحفظ: "descending" يبدأ من سورة الناس، "ascending" من الفاتحة
HIFZ_DIRECTION = os.getenv('HIFZ_DIRECTION', 'descending')

SCHOOL_NAME = os.getenv('SCHOOL_NAME', 'المدرسة القرآنية للإمام الشافعي')

# خط TTF يدعم العربية لملفات PDF (اختياري)
REPORT_FONT_PATH = os.getenv('REPORT_FONT_PATH', '')

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps": {
            "handlers": ["console"],
            "level": os.getenv('APPS_LOG_LEVEL', 'DEBUG'),
            "propagate": False,
        },
    },
}
