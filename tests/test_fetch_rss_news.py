# pylint: disable=redefined-outer-name
"""
Unit tests for the fetch_rss_news module.

This module tests feed content-type detection, RSS and Atom extraction with
keyword filtering, and the walk over feed endpoints with its failure handling.
"""

from unittest.mock import patch, MagicMock
import pytest
import requests

from agro_news_feed.core.fetch_rss_news import (
    FEED_HINTS,
    fetch_feed_items,
    fetch_rss_articles,
    is_feed_content_type,
)
from agro_news_feed.core.normalize import url_hash
from agro_news_feed.core.types import Source

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>MaquiNAC</title>
    <link>https://maquinac.com</link>
    <description>Noticias de maquinaria</description>
    <item>
      <title>Venta de Tractores crece 20%</title>
      <link>https://maquinac.com/2024/03/venta-tractores/</link>
      <description>Datos de la cámara del sector.</description>
      <pubDate>Fri, 01 Mar 2024 10:00:00 +0000</pubDate>
    </item>
    <item>
      <title>Receta de asado</title>
      <link>https://maquinac.com/asado/</link>
      <description>Nada que ver con el campo.</description>
      <pubDate>Sat, 02 Mar 2024 10:00:00 +0000</pubDate>
    </item>
    <item>
      <title>Nuevo modelo presentado</title>
      <link>https://maquinac.com/nuevo-modelo/</link>
      <description>Un tractor eléctrico para tambos.</description>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Agrofy News</title>
  <id>tag:news.agrofy.com.ar,2024:feed</id>
  <updated>2024-02-10T08:30:00Z</updated>
  <entry>
    <title>Mercado de maquinaria en alza</title>
    <link rel="alternate" href="https://news.agrofy.com.ar/noticia/1"/>
    <id>tag:news.agrofy.com.ar,2024:1</id>
    <summary>Resumen del trimestre.</summary>
    <updated>2024-02-10T08:30:00Z</updated>
  </entry>
</feed>
"""

# --- Fixtures ---


@pytest.fixture
def source() -> Source:
    """Provides a sample source."""
    return Source(name="MaquiNAC", base="https://maquinac.com")


@pytest.fixture
def keywords() -> list[str]:
    """Provides a sample keyword list."""
    return ["tractor", "venta de tractores", "mercado de maquinaria"]


def make_response(
    body: str, status_code: int = 200, content_type: str = "application/rss+xml"
) -> MagicMock:
    """Build a fake requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = {"content-type": content_type}
    response.content = body.encode("utf-8")
    response.text = body
    return response


# --- Tests for is_feed_content_type ---


@pytest.mark.parametrize(
    "content_type",
    [
        "application/rss+xml; charset=UTF-8",
        "application/atom+xml",
        "application/xml",
        "text/xml",
        "application/rdf+xml",
    ],
)
def test_is_feed_content_type_accepts_xml(content_type: str) -> None:
    """XML flavoured content types are accepted."""
    assert is_feed_content_type(content_type)


@pytest.mark.parametrize("content_type", ["text/html; charset=utf-8", "application/json", "", None])
def test_is_feed_content_type_rejects_others(content_type: str) -> None:
    """HTML, JSON and missing content types are rejected."""
    assert not is_feed_content_type(content_type)


# --- Tests for fetch_rss_articles ---


@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_rss_articles_success(
    mock_get: MagicMock, source: Source, keywords: list[str]
) -> None:
    """
    Tests that relevant RSS items are extracted and normalized.
    """
    # --- Arrange: Mock a valid RSS response ---
    mock_get.return_value = make_response(RSS_FEED)

    # --- Act: Call the function under test ---
    articles = fetch_rss_articles("https://maquinac.com/feed", source, keywords)

    # --- Assert: Verify the results ---
    assert len(articles) == 2
    first, second = articles
    assert first.title == "Venta de Tractores crece 20%"
    assert first.source == "MaquiNAC"
    assert first.url == "https://maquinac.com/2024/03/venta-tractores/"
    assert first.id == url_hash(first.url)
    assert first.teaser == "Datos de la cámara del sector."
    assert first.date == "2024-03-01T10:00:00.000Z"
    # Matched through the description only, and has no date
    assert second.url == "https://maquinac.com/nuevo-modelo/"
    assert second.date is None


@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_rss_articles_atom(mock_get: MagicMock, keywords: list[str]) -> None:
    """
    Tests that Atom entries are parsed, using <updated> as the date.
    """
    mock_get.return_value = make_response(ATOM_FEED, content_type="application/atom+xml")
    source = Source(name="Agrofy News", base="https://news.agrofy.com.ar")

    articles = fetch_rss_articles("https://news.agrofy.com.ar/atom.xml", source, keywords)

    assert len(articles) == 1
    assert articles[0].url == "https://news.agrofy.com.ar/noticia/1"
    assert articles[0].teaser == "Resumen del trimestre."
    assert articles[0].date == "2024-02-10T08:30:00.000Z"


@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_rss_articles_http_error(
    mock_get: MagicMock, source: Source, keywords: list[str]
) -> None:
    """
    Tests that an empty list is returned when the status is not 200.
    """
    mock_get.return_value = make_response(RSS_FEED, status_code=404)

    articles = fetch_rss_articles("https://maquinac.com/feed", source, keywords)

    assert not articles


@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_rss_articles_html_content_type(
    mock_get: MagicMock, source: Source, keywords: list[str]
) -> None:
    """
    Tests that a 200 response that is not a feed is ignored.
    """
    mock_get.return_value = make_response(RSS_FEED, content_type="text/html")

    articles = fetch_rss_articles("https://maquinac.com/feed", source, keywords)

    assert not articles


@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_rss_articles_exception(
    mock_get: MagicMock, source: Source, keywords: list[str]
) -> None:
    """
    Tests that network errors are propagated to the caller.
    """
    mock_get.side_effect = requests.exceptions.ConnectionError("Failed to connect")

    with pytest.raises(requests.exceptions.ConnectionError, match="Failed to connect"):
        fetch_rss_articles("https://maquinac.com/feed", source, keywords)


# --- Tests for fetch_feed_items ---


@patch("agro_news_feed.core.fetch_rss_news.polite_pause")
@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_feed_items_skips_failing_hints(
    mock_get: MagicMock, mock_pause: MagicMock, source: Source, keywords: list[str]
) -> None:
    """
    Tests that errors, bad statuses and non-feed responses move on to the next hint.
    """
    # --- Arrange: three failing hints, then a working feed ---
    mock_get.side_effect = [
        requests.exceptions.Timeout("timed out"),
        make_response("", status_code=500),
        make_response("<html></html>", content_type="text/html"),
        make_response(RSS_FEED),
    ]

    # --- Act ---
    articles = fetch_feed_items(source, keywords)

    # --- Assert: stopped at the fourth hint ---
    assert len(articles) == 2
    assert mock_get.call_count == 4
    assert mock_get.call_args_list[0].args[0] == "https://maquinac.com/feed"
    assert mock_get.call_args_list[1].args[0] == "https://maquinac.com/?feed=rss2"
    assert mock_pause.call_count == 3


@patch("agro_news_feed.core.fetch_rss_news.polite_pause")
@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_feed_items_irrelevant_feed_tries_next(
    mock_get: MagicMock, mock_pause: MagicMock, source: Source
) -> None:
    """
    Tests that a feed without relevant items does not stop the search.
    """
    mock_get.return_value = make_response(RSS_FEED)

    articles = fetch_feed_items(source, ["cosechadora"])

    assert not articles
    assert mock_get.call_count == len(FEED_HINTS)
    assert mock_pause.call_count == len(FEED_HINTS) - 1


@patch("agro_news_feed.core.fetch_rss_news.polite_pause")
@patch("agro_news_feed.core.fetch_rss_news.feedparser.parse")
@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_feed_items_parse_failure(
    mock_get: MagicMock,
    mock_parse: MagicMock,
    mock_pause: MagicMock,
    source: Source,
    keywords: list[str],
) -> None:
    """
    Tests that unexpected parser errors are swallowed.
    """
    mock_get.return_value = make_response(RSS_FEED)
    mock_parse.side_effect = ValueError("broken document")

    articles = fetch_feed_items(source, keywords)

    assert not articles
    assert mock_parse.call_count == len(FEED_HINTS)


@patch("agro_news_feed.core.fetch_rss_news.polite_pause")
@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_feed_items_empty_feed_tries_next(
    mock_get: MagicMock, mock_pause: MagicMock, source: Source, keywords: list[str]
) -> None:
    """
    Tests that a valid feed without entries moves on to the next hint.
    """
    empty_feed = (
        '<?xml version="1.0"?><rss version="2.0"><channel>'
        "<title>MaquiNAC</title><link>https://maquinac.com</link>"
        "</channel></rss>"
    )
    mock_get.side_effect = [make_response(empty_feed), make_response(RSS_FEED)]

    articles = fetch_feed_items(source, keywords)

    assert len(articles) == 2
    assert mock_get.call_count == 2
    assert mock_pause.call_count == 1


@patch("agro_news_feed.core.fetch_rss_news.http_get")
def test_fetch_rss_articles_relative_link(
    mock_get: MagicMock, source: Source, keywords: list[str]
) -> None:
    """
    Tests that relative item links resolve against the source base URL.
    """
    feed = (
        '<?xml version="1.0"?><rss version="2.0"><channel><title>MaquiNAC</title>'
        "<item><title>Tractores</title><link>nota/tractores</link></item>"
        "</channel></rss>"
    )
    mock_get.return_value = make_response(feed)

    articles = fetch_rss_articles("https://maquinac.com/?feed=rss2", source, keywords)

    assert [a.url for a in articles] == ["https://maquinac.com/nota/tractores"]
