from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    # POST /api/orders/                                - Submit (replace) my order
    # GET  /api/orders/group/{group_id}/summary/       - Group summary
    # PUT  /api/orders/{order_id}/payment-status/      - Set PAID/UNPAID (creator)
    path('', views.submit_order, name='submit'),
    path('group/<int:group_id>/summary/', views.group_summary, name='group-summary'),
    path('<int:order_id>/payment-status/', views.payment_status, name='payment-status'),
]
