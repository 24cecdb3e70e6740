# apps/itineraries/urls.py
from django.urls import path
from . import views

app_name = "itineraries"

urlpatterns = [
    path("", views.builder, name="builder"),
    path("generate/", views.generate, name="generate"),
    path("spots/<int:spot_id>/toggle/", views.toggle_spot, name="toggle_spot"),
    path("save/", views.save, name="save"),
    path("reset/", views.reset, name="reset"),
    path("mine/json/", views.my_itineraries_json, name="my_itineraries_json"),
    path("<int:itinerary_id>/", views.itinerary_detail, name="detail"),
    path("<int:itinerary_id>/delete/", views.delete_itinerary, name="delete"),
]
