from django.urls import path
from . import views

app_name = 'tracker'

urlpatterns = [
    path('dashboard/', views.dashboard, name='dashboard'),

    # --- Students ---
    path('students/', views.students, name='students'),
    path('students/add/', views.student_add, name='student_add'),
    path('students/<int:student_id>/edit/', views.student_edit, name='student_edit'),
    path('students/<int:student_id>/status/', views.student_status, name='student_status'),
    path('students/<int:student_id>/report/', views.student_report, name='student_report'),
    path('students/<int:student_id>/report/<str:fmt>/', views.student_report_export, name='student_report_export'),

    # --- Daily sessions ---
    path('sessions/', views.sessions_calendar, name='sessions'),
    path('sessions/<str:day>/', views.session_day, name='session_day'),
    path('sessions/<str:day>/delete/', views.session_delete, name='session_delete'),

    # --- Surah progress ---
    path('surahs/', views.surahs, name='surahs'),
    path('surahs/<int:student_id>/<str:action>/', views.progress_action, name='progress_action'),

    # --- Ranking & statistics ---
    path('ranking/', views.ranking, name='ranking'),
    path('points/', views.points, name='points'),
    path('stats/', views.statistics, name='stats'),

    # --- Daily reports ---
    path('reports/', views.reports, name='reports'),
    path('reports/add/', views.report_form, name='report_add'),
    path('reports/<int:report_id>/edit/', views.report_form, name='report_edit'),
    path('reports/<int:report_id>/delete/', views.report_delete, name='report_delete'),

    # --- Data exchange ---
    path('data/', views.data_exchange, name='data'),
    path('data/students/export/', views.students_export, name='students_export'),
    path('data/students/import/', views.students_import, name='students_import'),
    path('data/sessions/<str:day>/export/', views.session_export, name='session_export'),
    path('data/sessions/import/', views.session_import, name='session_import'),
]
