"""
Flickr URL and Log Line Formatting
"""

from typing import List

from .models import ManifestEntry


def preview_url(photo: ManifestEntry, media_host: str = "live.staticflickr.com", size: str = "w") -> str:
    """
    Direct image URL handed to the vision service.

    https://live.staticflickr.com/{server-id}/{id}_{secret}_{size-suffix}.jpg
    """
    return f"https://{media_host}/{photo.server}/{photo.id}_{photo.secret}_{size}.jpg"


def web_url(photo: ManifestEntry, site_host: str = "www.flickr.com") -> str:
    """
    Photo page for humans.

    https://www.flickr.com/photos/{owner-id}/{photo-id}
    """
    return f"https://{site_host}/photos/{photo.owner}/{photo.id}"


def format_verdict_line(
    passed_count: int,
    target_count: int,
    photo_url: str,
    title: str,
    issues: List[str],
) -> str:
    """Progress line for one classified photo, e.g. '3/10 NG <url> <title>: bw'."""
    if not issues:
        return f"{passed_count}/{target_count} OK {photo_url} {title}"
    return f"{passed_count}/{target_count} NG {photo_url} {title}: {','.join(issues)}"
