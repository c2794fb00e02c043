from django.conf import settings
from django.shortcuts import redirect


def index(request):
    # The browsing surface is a separate frontend; send visitors there
    return redirect(settings.FRONTEND_URL)
