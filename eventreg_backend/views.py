from django.conf import settings
from django.shortcuts import redirect


def index(request):
    # The API has no landing page of its own; send browsers to the web app
    return redirect(settings.FRONTEND_URL)
