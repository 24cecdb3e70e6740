from django.urls import path
from . import views

app_name = 'places'

urlpatterns = [
    path('', views.home, name='home'),
    path('explore/', views.explore, name='explore'),
    path('restaurants/', views.restaurant_list, name='restaurant_list'),
    path('events/', views.event_list, name='event_list'),
    path('places/<int:pk>/', views.spot_detail, name='spot_detail'),
    path('places/<int:pk>/quick-add/', views.quick_add, name='quick_add'),
    path('map/', views.map_page, name='map'),
    path('map/markers/', views.map_markers_json, name='map_markers'),
    path('weather/', views.weather, name='weather'),
]
