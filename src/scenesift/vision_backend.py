"""
Vision Backend for Image Analysis

Client for the Azure Computer Vision "analyze" endpoint, requesting the
adult, color, tags and objects features for a publicly reachable image URL.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .models import ImageAnalysis

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/vision/v3.1/analyze"
VISUAL_FEATURES = "adult,color,tags,objects"


class ServiceError(Exception):
    """Raised when the vision service cannot deliver an analysis."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_image_rejected(self) -> bool:
        """True when the service refused this particular image (HTTP 400)."""
        return self.status_code == 400


class VisionClient:
    """
    Interface to the Azure Computer Vision analyze API.

    One request per call, no retries: a failed analysis is simply not cached
    and is attempted again on the next run.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize vision client.

        Args:
            endpoint: Resource endpoint (e.g., "https://myres.cognitiveservices.azure.com")
            api_key: Subscription key for the resource
            timeout: Request timeout in seconds, None to wait indefinitely
            client: Pre-built httpx client (tests inject a MockTransport here)
        """
        self.analyze_url = str(httpx.URL(endpoint).copy_with(path=ANALYZE_PATH))
        self.api_key = api_key
        self.client = client or httpx.Client(timeout=timeout)

    def analyze(self, image_url: str) -> ImageAnalysis:
        """
        Analyze one image.

        Args:
            image_url: Externally reachable image URL

        Returns:
            Parsed analysis document

        Raises:
            ServiceError: On transport failure, non-200 status or malformed body
        """
        request = self.client.build_request(
            "POST",
            self.analyze_url,
            params={"visualFeatures": VISUAL_FEATURES},
            headers={"Ocp-Apim-Subscription-Key": self.api_key},
            json={"url": image_url},
        )
        logger.info(f"Calling vision API: {str(request.url).split('://', 1)[-1]}")

        try:
            response = self.client.send(request)
        except httpx.HTTPError as e:
            raise ServiceError(f"Vision API request failed: {e}") from e

        if response.status_code != 200:
            raise ServiceError(
                f"Vision API HTTP status {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return ImageAnalysis.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            # ValueError covers both JSONDecodeError and UnicodeDecodeError
            raise ServiceError(
                f"Malformed vision API response: {e}", status_code=response.status_code
            ) from e

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "VisionClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
