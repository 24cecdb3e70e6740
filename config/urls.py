from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("django-admin/", admin.site.urls),
    path("accounts/", include("allauth.urls")),
    path("", include("apps.places.urls")),
    path("users/", include("apps.users.urls")),
    path("itinerary/", include("apps.itineraries.urls")),
    path("reviews/", include("apps.reviews.urls")),
    path("admin/", include("apps.adminpanel.urls")),
]
