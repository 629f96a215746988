from django.contrib import admin

from .models import (
    DailyReport, DailySession, MemorizedSurah, SessionRecord, Student, Surah, SurahProgress,
)


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'owner', 'status', 'memorized_surahs_count', 'registration_date')
    search_fields = ('full_name', 'guardian_name', 'phone1')
    list_filter = ('status', 'owner')


class SessionRecordInline(admin.TabularInline):
    model = SessionRecord
    extra = 0


@admin.register(DailySession)
class DailySessionAdmin(admin.ModelAdmin):
    list_display = ('date', 'session_type', 'owner', 'records_count')
    list_filter = ('session_type', 'owner')
    date_hierarchy = 'date'
    inlines = [SessionRecordInline]

    def records_count(self, obj):
        return obj.records.count()
    records_count.short_description = "عدد السجلات"


@admin.register(SessionRecord)
class SessionRecordAdmin(admin.ModelAdmin):
    list_display = ('session', 'student', 'attendance', 'memorization', 'review', 'behavior')
    list_filter = ('attendance', 'memorization', 'behavior', 'session__date')


@admin.register(Surah)
class SurahAdmin(admin.ModelAdmin):
    list_display = ('number', 'name', 'verses')
    search_fields = ('name',)


@admin.register(SurahProgress)
class SurahProgressAdmin(admin.ModelAdmin):
    list_display = ('student', 'surah', 'pending_surah', 'status', 'from_verse', 'to_verse', 'retake_count')
    list_filter = ('status',)


@admin.register(MemorizedSurah)
class MemorizedSurahAdmin(admin.ModelAdmin):
    list_display = ('student', 'surah', 'memorized_on')


@admin.register(DailyReport)
class DailyReportAdmin(admin.ModelAdmin):
    list_display = ('date', 'category', 'author_name', 'owner', 'created_at')
    list_filter = ('category', 'date')
    search_fields = ('note', 'author_name')
