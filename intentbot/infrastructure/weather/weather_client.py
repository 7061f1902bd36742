from typing import Any, Dict, List, Optional

import httpx
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from intentbot.domain.interfaces.model_interface import WeatherClientInterface
from intentbot.utils.logger import get_logger
from intentbot.utils.exceptions import LookupFailureError

SERVICE_NAME = "weather"


class MetaWeatherClient(WeatherClientInterface):
    """
    Client for a MetaWeather-style location search and forecast API.
    """

    def __init__(
        self,
        base_url: str = "https://www.metaweather.com/api",
        timeout: float = 10.0,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the weather client.

        Args:
            base_url: API root
            timeout: Per-request timeout in seconds
            max_retries: Attempts made for transport errors before giving up
            transport: Optional httpx transport, used to substitute the network
        """
        self.logger = get_logger(__name__)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self._transport = transport

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Send a GET request to the weather API.

        Raises:
            LookupFailureError: If the API cannot be reached or answers badly
        """
        url = f"{self.base_url}{path}"
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True
            ):
                with attempt:
                    async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                        response = await client.get(url, params=params)
                        response.raise_for_status()
                        return response.json()

        except httpx.HTTPError as e:
            self.logger.error(f"HTTP error calling weather API: {str(e)}")
            raise LookupFailureError(SERVICE_NAME, f"Weather API request failed: {str(e)}", {"url": url}) from e

        except ValueError as e:
            self.logger.error(f"Weather API returned invalid JSON: {str(e)}")
            raise LookupFailureError(SERVICE_NAME, "Weather API returned invalid JSON", {"url": url}) from e

    async def search(self, location: str) -> List[Dict[str, Any]]:
        """
        Find candidate places matching free text.

        Args:
            location: Location text

        Returns:
            Candidate places, possibly empty
        """
        results = await self._get_json("/location/search/", params={"query": location.strip()})
        if not isinstance(results, list):
            raise LookupFailureError(SERVICE_NAME, "Unexpected location search response")
        return results

    async def detail(self, candidate_id: Any) -> Dict[str, Any]:
        """
        Fetch today's conditions for a place.

        Args:
            candidate_id: The place's ``woeid``

        Returns:
            Dictionary with location_type, title and condition keys
        """
        weather = await self._get_json(f"/location/{candidate_id}/")
        try:
            return {
                "location_type": weather["location_type"],
                "title": weather["title"],
                "condition": weather["consolidated_weather"][0]["weather_state_name"],
            }
        except (KeyError, IndexError, TypeError) as e:
            raise LookupFailureError(
                SERVICE_NAME,
                f"Unexpected forecast response for {candidate_id}",
                {"candidate_id": candidate_id}
            ) from e


class WeatherService:
    """
    Turns a location into a one-sentence weather report.
    """

    def __init__(self, client: WeatherClientInterface):
        self.client = client
        self.logger = get_logger(__name__)

    @staticmethod
    def unknown_location_message(location: str) -> str:
        return f"I'm not smart enough to know weather data for {location}"

    async def describe(self, location: str) -> str:
        """
        Describe today's weather at a location.

        Lookup failures are reported in the returned sentence, never raised.

        Args:
            location: Location text extracted from the user's sentence

        Returns:
            The weather sentence, or an apology naming the location
        """
        try:
            candidates = await self.client.search(location)
            if not candidates:
                self.logger.info(f"No weather candidates for location: {location}")
                return self.unknown_location_message(location)

            candidate = candidates[0]
            if not isinstance(candidate, dict):
                raise LookupFailureError(SERVICE_NAME, "Unexpected location search response")
            weather = await self.client.detail(candidate.get("woeid", candidate.get("id")))

        except LookupFailureError as e:
            self.logger.warning(f"Weather lookup failed for '{location}': {e.message}")
            return self.unknown_location_message(location)

        return (
            f"The {weather['location_type']} of {weather['title']} "
            f"is expecting {weather['condition']} today."
        )

