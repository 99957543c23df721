import requests

from errors import WeatherError
from log_utils import log_entry

OWM_URL = 'https://api.openweathermap.org/data/2.5/weather'


class WeatherClient:
    """Current outdoor temperature from OpenWeatherMap, in Celsius"""

    def __init__(self, api_key, timeout=10, units='metric', lang='en'):
        if not api_key:
            raise WeatherError("OpenWeatherMap API key is missing")
        self.api_key = api_key
        self.timeout = timeout
        self.units = units
        self.lang = lang

    def get_current_temperature(self, location):
        if not location:
            raise WeatherError("No weather location given")

        params = {
            'q': location,
            'units': self.units,
            'lang': self.lang,
            'appid': self.api_key,
        }
        try:
            response = requests.get(OWM_URL, params=params, allow_redirects=False,
                                    timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as e:
            raise WeatherError(f"Get request timed out on url '{OWM_URL}': {e}") from e
        except requests.RequestException as e:
            raise WeatherError(f"Weather request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise WeatherError(f"Cannot parse weather response: {response.text}") from e

        if response.status_code != 200:
            message = data.get('message', '') if isinstance(data, dict) else ''
            raise WeatherError(f"Weather request failed: {response.status_code} {message}")

        try:
            temp = float(data['main']['temp'])
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherError(f"Weather response has no main.temp: {e}") from e

        log_entry(f"Outdoor temperature in {location}: {temp}°C")
        return temp
