import logging
from dataclasses import asdict, dataclass
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TIMEOUT = 5


class WeatherUnavailable(Exception):
    pass


@dataclass(frozen=True)
class WeatherReport:
    city: str
    temperature: float
    feels_like: Optional[float]
    humidity: Optional[int]
    description: str
    icon: str

    def to_dict(self):
        return asdict(self)


def fetch_current_weather(city: str, api_key: Optional[str] = None) -> WeatherReport:
    """
    Current conditions for ``city`` from the OpenWeatherMap current-weather API (metric units).
    The key comes from settings.WEATHER_API_KEY and never leaves the server.
    """
    api_key = api_key or settings.WEATHER_API_KEY
    if not api_key:
        raise WeatherUnavailable("WEATHER_API_KEY is not configured")

    params = {"q": city, "appid": api_key, "units": "metric"}
    try:
        r = requests.get(settings.WEATHER_API_URL, params=params, timeout=TIMEOUT)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Weather lookup failed for %s: %s", city, e)
        raise WeatherUnavailable(str(e)) from e

    try:
        main = data["main"]
        condition = (data.get("weather") or [{}])[0]
        return WeatherReport(
            city=data.get("name") or city,
            temperature=float(main["temp"]),
            feels_like=main.get("feels_like"),
            humidity=main.get("humidity"),
            description=condition.get("description", ""),
            icon=condition.get("icon", ""),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Unexpected weather payload for %s: %s", city, e)
        raise WeatherUnavailable("unexpected weather payload") from e
