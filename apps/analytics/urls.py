from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Dashboard cards
    path('dashboard/', views.dashboard, name='dashboard'),

    # Calendar
    path('calendar/', views.calendar_month, name='calendar'),
    path('calendar/day/', views.calendar_day, name='calendar-day'),

    # Payers
    path('payers/', views.payers, name='payers'),

    # Paid statement (general or per category)
    path('paid-details/', views.paid_details, name='paid-details'),
]
