import logging

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from waypoint.models.domain import WeatherForecast
from waypoint.models.events import WeatherReceived
from waypoint.services.weather_api import WeatherApiService
from waypoint.utils.event_bus import EventBus

logger = logging.getLogger(__name__)


class WeatherInput(BaseModel):
    location: str = Field(
        description="The city name or location to get weather for (e.g., 'Warsaw', 'New York', 'London')"
    )


def format_weather(forecast: WeatherForecast) -> str:
    return "\n".join([
        f"Weather in {forecast.location}:",
        f"- Temperature: {forecast.temperature}°C",
        f"- Conditions: {forecast.condition}",
        f"- Humidity: {forecast.humidity}%",
        f"- Wind Speed: {forecast.wind_speed} km/h",
    ])


def create_weather_tool(weather_service: WeatherApiService, event_bus: EventBus) -> StructuredTool:
    async def get_weather(location: str) -> str:
        try:
            forecast = await weather_service.get_weather(location)
        except Exception as e:
            # not-found, HTTP and parsing failures all go back to the model as text
            logger.warning(f"Weather lookup failed for '{location}': {e}")
            return f"Unable to get weather for '{location}': {e}"

        event_bus.try_publish(WeatherReceived(forecast=forecast))
        return format_weather(forecast)

    return StructuredTool.from_function(
        coroutine=get_weather,
        name="get_weather",
        description="Get the current weather for a location. Returns temperature, conditions, humidity, and wind speed.",
        args_schema=WeatherInput,
    )
