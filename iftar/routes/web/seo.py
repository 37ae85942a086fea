from flask import Blueprint, Response, render_template_string, request

from iftar.extensions import cache
from iftar.services import PlaceService

web_seo_bp = Blueprint("web_seo", __name__)

STATIC_PAGES = ("/", "/login", "/add")

SITEMAP_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{%- for url in static_pages %}
  <url>
    <loc>{{ url }}</loc>
    <changefreq>daily</changefreq>
    <priority>0.8</priority>
  </url>
{%- endfor %}
{%- for url in place_pages %}
  <url>
    <loc>{{ url }}</loc>
    <changefreq>weekly</changefreq>
    <priority>0.7</priority>
  </url>
{%- endfor %}
</urlset>
"""


def _base_url():
    return f"https://{request.host}"


def sitemap_cache_key():
    return f"sitemap/{request.host}"


@web_seo_bp.get("/robots.txt")
def robots():
    body = f"User-agent: *\nAllow: /\nSitemap: {_base_url()}/sitemap.xml\n"
    return Response(body, mimetype="text/plain")


@web_seo_bp.get("/sitemap.xml")
@cache.cached(timeout=600, key_prefix=sitemap_cache_key)
def sitemap():
    base_url = _base_url()
    places = PlaceService.list_approved_places()
    xml = render_template_string(
        SITEMAP_TEMPLATE,
        static_pages=[f"{base_url}{path}" for path in STATIC_PAGES],
        place_pages=[f"{base_url}/places/{place['id']}" for place in places],
    )
    return Response(xml, mimetype="application/xml")
