# apps/reviews/urls.py
from django.urls import path
from . import views

app_name = 'reviews'

urlpatterns = [
    path('spot/<int:spot_id>/create/', views.SpotReviewCreateView.as_view(), name='create'),
    path('spot/<int:spot_id>/<int:review_id>/delete/', views.delete_review, name='delete'),
    path('spot/<int:spot_id>/fragment/', views.spot_review_list_fragment, name='list_fragment'),
]
