from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('auth/register/', views.register, name='register'),
    path('auth/login/', views.login, name='login'),
    path('auth/user/', views.get_current_user, name='current-user'),

    # Directory & friends
    path('users/search/', views.search, name='search'),
    path('users/friends/', views.friends, name='friends'),
]
