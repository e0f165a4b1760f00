from django.urls import re_path

from .views import IpaymuCallbackView

urlpatterns = [
    re_path(r"^ipaymu-callback/?$", IpaymuCallbackView.as_view(), name="ipaymu-callback"),
]
