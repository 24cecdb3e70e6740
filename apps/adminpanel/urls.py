# apps/adminpanel/urls.py
from django.urls import path
from . import views

app_name = "adminpanel"

urlpatterns = [
    path("", views.AdminDashboardView.as_view(), name="dashboard"),
    path("<slug:panel>/", views.PanelListView.as_view(), name="list"),
    path("<slug:panel>/add/", views.PanelCreateView.as_view(), name="create"),
    path("<slug:panel>/<int:pk>/edit/", views.PanelUpdateView.as_view(), name="update"),
    path("<slug:panel>/<int:pk>/delete/", views.PanelDeleteView.as_view(), name="delete"),
]
