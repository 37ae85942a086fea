from urllib.parse import urlparse

import requests
from flask import current_app

from iftar.errors import AppError, UpstreamError


class LinkService:
    @staticmethod
    def validate(url):
        if not url:
            raise AppError("URL is required.", 400)
        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            raise AppError("Invalid URL format.", 400)
        if parsed.hostname.lower() not in current_app.config["RESOLVE_LINK_HOSTS"]:
            raise AppError("Invalid URL domain. Only Google Maps short links are allowed.", 400)
        return url

    @staticmethod
    def resolve(url):
        """Follow a map short link to its final destination URL."""
        LinkService.validate(url)
        try:
            response = requests.head(
                url,
                allow_redirects=True,
                timeout=current_app.config["RESOLVE_LINK_TIMEOUT"],
            )
        except requests.RequestException as exc:
            current_app.logger.warning("Failed to resolve link %s: %s", url, exc)
            raise UpstreamError("Failed to resolve link.") from exc
        return response.url
