from django.urls import path

from .views import ApprovalView

urlpatterns = [
    path("approval/", ApprovalView.as_view(), name="admin-approval"),
]
