from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Surah',
            fields=[
                ('number', models.PositiveSmallIntegerField(primary_key=True, serialize=False, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(114)])),
                ('name', models.CharField(max_length=64, unique=True)),
                ('verses', models.PositiveSmallIntegerField()),
            ],
            options={
                'ordering': ['number'],
            },
        ),
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=150, verbose_name='الاسم الكامل')),
                ('guardian_name', models.CharField(max_length=150, verbose_name='اسم الولي')),
                ('phone1', models.CharField(max_length=30, verbose_name='رقم الهاتف 1')),
                ('phone2', models.CharField(blank=True, default='', max_length=30, verbose_name='رقم الهاتف 2')),
                ('birth_date', models.DateField(verbose_name='تاريخ الميلاد')),
                ('registration_date', models.DateField(default=django.utils.timezone.localdate, verbose_name='تاريخ التسجيل')),
                ('status', models.CharField(choices=[('active', 'نشط'), ('expelled', 'مطرود'), ('long_absent', 'غائب طويل'), ('deleted', 'محذوف')], default='active', max_length=12, verbose_name='الحالة')),
                ('memorized_surahs_count', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(114)], verbose_name='السور المحفوظة')),
                ('daily_memorization_amount', models.CharField(choices=[('eighth', 'ثمن'), ('quarter', 'ربع'), ('half', 'نصف'), ('page', 'صفحة'), ('more', 'أكثر')], default='page', max_length=10, verbose_name='مقدار الحفظ اليومي')),
                ('notes', models.TextField(blank=True, default='', verbose_name='ملاحظات')),
                ('action_reason', models.TextField(blank=True, default='', verbose_name='سبب الإجراء')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='students', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='DailySession',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(verbose_name='التاريخ')),
                ('session_type', models.CharField(choices=[('basic', 'حصة أساسية'), ('extra_1', 'حصة إضافية 1'), ('extra_2', 'حصة إضافية 2'), ('activity', 'حصة أنشطة'), ('holiday', 'يوم عطلة')], default='basic', max_length=10, verbose_name='نوع الحصة')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_sessions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['date'],
                'unique_together': {('owner', 'date')},
            },
        ),
        migrations.CreateModel(
            name='SessionRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('attendance', models.CharField(choices=[('present', 'حاضر'), ('absent', 'غائب'), ('late', 'متأخر'), ('makeup', 'تعويض'), ('not_required', 'غير مطالب')], default='present', max_length=12, verbose_name='الحضور')),
                ('memorization', models.CharField(blank=True, choices=[('excellent', 'ممتاز'), ('good', 'جيد'), ('average', 'متوسط'), ('poor', 'ضعيف')], max_length=10, null=True, verbose_name='التقييم')),
                ('review', models.BooleanField(blank=True, null=True, verbose_name='مراجعة')),
                ('behavior', models.CharField(blank=True, choices=[('calm', 'هادئ'), ('medium', 'متوسط'), ('undisciplined', 'غير منضبط')], max_length=15, null=True, verbose_name='السلوك')),
                ('notes', models.TextField(blank=True, default='', verbose_name='ملاحظات')),
                ('session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='records', to='tracker.dailysession')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='session_records', to='tracker.student')),
            ],
            options={
                'ordering': ['id'],
                'unique_together': {('session', 'student')},
            },
        ),
        migrations.CreateModel(
            name='SurahProgress',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('in_progress', 'قيد الحفظ'), ('memorized', 'تم الحفظ'), ('recited', 'تمت التلقين'), ('reviewed', 'تمت المراجعة'), ('group_review', 'مراجعة جماعية'), ('postponed', 'مؤجلة مؤقتًا'), ('re_memorize', 'إعادة حفظ')], default='in_progress', max_length=15, verbose_name='الحالة')),
                ('from_verse', models.PositiveSmallIntegerField(default=1, verbose_name='من آية')),
                ('to_verse', models.PositiveSmallIntegerField(default=1, verbose_name='إلى آية')),
                ('total_verses', models.PositiveSmallIntegerField(default=1, verbose_name='عدد الآيات')),
                ('start_date', models.DateField(default=django.utils.timezone.localdate, verbose_name='تاريخ البدء')),
                ('completion_date', models.DateField(blank=True, null=True, verbose_name='تاريخ الإتمام')),
                ('retake_count', models.PositiveSmallIntegerField(default=0, verbose_name='مرات الإعادة')),
                ('notes', models.TextField(blank=True, default='', verbose_name='ملاحظات')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('pending_surah', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='tracker.surah', verbose_name='سورة بانتظار التأكيد')),
                ('student', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='surah_progress', to='tracker.student')),
                ('surah', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='tracker.surah', verbose_name='السورة')),
            ],
            options={
                'verbose_name_plural': 'surah progress',
            },
        ),
        migrations.CreateModel(
            name='MemorizedSurah',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('memorized_on', models.DateField(default=django.utils.timezone.localdate)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memorized_surahs', to='tracker.student')),
                ('surah', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='tracker.surah')),
            ],
            options={
                'ordering': ['memorized_on', 'id'],
                'unique_together': {('student', 'surah')},
            },
        ),
        migrations.CreateModel(
            name='DailyReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(default=django.utils.timezone.localdate, verbose_name='التاريخ')),
                ('note', models.TextField(verbose_name='التقرير')),
                ('category', models.CharField(choices=[('suggestion', 'اقتراح'), ('complaint', 'شكوى'), ('general', 'ملاحظة عامة'), ('thanks', 'شكر'), ('request', 'طلب')], default='suggestion', max_length=12, verbose_name='التصنيف')),
                ('author_name', models.CharField(blank=True, default='', max_length=150, verbose_name='اسم الكاتب')),
                ('image', models.ImageField(blank=True, null=True, upload_to='reports/', verbose_name='صورة')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_reports', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-date', '-created_at', '-id'],
            },
        ),
    ]
