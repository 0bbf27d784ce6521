from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = SimpleRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # GET    /api/groups/              - Dashboard of the user's groups
    # POST   /api/groups/              - Create group
    # PUT    /api/groups/{id}/         - Update group (creator)
    # DELETE /api/groups/{id}/         - Delete group (creator, all paid)
    # PUT    /api/groups/{id}/status/  - Open or close group (creator)
    path('', include(router.urls)),
]
