from django.conf import settings


def public_settings(request):
    """Browser-safe settings for the map and weather widgets. Server-only keys stay out."""
    return {
        "GOOGLE_MAPS_API_KEY": settings.GOOGLE_MAPS_API_KEY,
        "map_center": settings.MAP_CENTER,
        "map_zoom": settings.MAP_ZOOM,
        "weather_city": settings.WEATHER_DEFAULT_CITY,
    }
