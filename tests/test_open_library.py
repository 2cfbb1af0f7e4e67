import httpx
import pytest

from etagere.core.errors import NoData, TransportFailure
from etagere.core.sources.open_library import OpenLibrarySource, description_text

ISBN = "9782070612758"

EDITION = {
    "title": "Le petit prince",
    "publishers": ["Gallimard"],
    "publish_date": "2007",
    "covers": [8231856],
    "languages": [{"key": "/languages/fre"}],
    "authors": [{"key": "/authors/OL27258A"}],
    "works": [{"key": "/works/OL1168083W"}],
}


def _routes(routes: dict, seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request.url.path)
        answer = routes.get(request.url.path)
        if answer is None:
            return httpx.Response(404)
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    return handler


async def test_edition_with_author_and_work(settings, make_client):
    routes = {
        f"/isbn/{ISBN}.json": EDITION,
        "/authors/OL27258A.json": {"name": "Antoine de Saint-Exupéry"},
        "/works/OL1168083W.json": {"description": {"type": "/type/text", "value": "Un conte."}},
    }
    async with make_client(_routes(routes)) as client:
        record = await OpenLibrarySource(settings).lookup(client, ISBN)

    assert record.source == "openlibrary"
    assert record.title == "Le petit prince"
    assert record.author == "Antoine de Saint-Exupéry"
    assert record.publisher == "Gallimard"
    assert record.publication_date == "2007"
    assert record.language == "fre"
    assert record.description == "Un conte."
    assert record.cover_url == "https://covers.openlibrary.org/b/id/8231856-L.jpg"


async def test_cover_is_derived_from_isbn_without_cover_id(settings, make_client):
    edition = {"title": "Sans couverture", "publisher": "Folio"}
    async with make_client(_routes({f"/isbn/{ISBN}.json": edition})) as client:
        record = await OpenLibrarySource(settings).lookup(client, ISBN)

    assert record.cover_url == f"https://covers.openlibrary.org/b/isbn/{ISBN}-L.jpg"
    assert record.publisher == "Folio"
    assert record.author is None
    assert record.language is None


async def test_dependent_lookup_failures_are_swallowed(settings, make_client):
    routes = {
        f"/isbn/{ISBN}.json": EDITION,
        "/authors/OL27258A.json": httpx.ConnectError("connection refused"),
        "/works/OL1168083W.json": httpx.Response(500),
    }
    async with make_client(_routes(routes)) as client:
        record = await OpenLibrarySource(settings).lookup(client, ISBN)

    assert record.title == "Le petit prince"
    assert record.author is None
    assert record.description is None


async def test_edition_description_skips_work_lookup(settings, make_client):
    seen: list[str] = []
    edition = dict(EDITION, description="Déjà là.")
    routes = {f"/isbn/{ISBN}.json": edition, "/authors/OL27258A.json": {"name": "A"}}
    async with make_client(_routes(routes, seen)) as client:
        record = await OpenLibrarySource(settings).lookup(client, ISBN)

    assert record.description == "Déjà là."
    assert "/works/OL1168083W.json" not in seen


async def test_page_description_fallback(settings, make_client):
    page = '<div class="read-more__content"><p>Depuis la page.</p></div>'
    routes = {
        f"/isbn/{ISBN}.json": {"title": "Le petit prince"},
        f"/isbn/{ISBN}": httpx.Response(200, text=page),
    }
    async with make_client(_routes(routes)) as client:
        record = await OpenLibrarySource(settings).lookup(client, ISBN)

    assert record.description == "Depuis la page."


async def test_missing_edition_is_no_data(settings, make_client):
    async with make_client(_routes({})) as client:
        with pytest.raises(NoData):
            await OpenLibrarySource(settings).lookup(client, ISBN)


async def test_unreachable_edition_fails_the_source(settings, make_client):
    routes = {f"/isbn/{ISBN}.json": httpx.ConnectError("down")}
    async with make_client(_routes(routes)) as client:
        with pytest.raises(TransportFailure):
            await OpenLibrarySource(settings).lookup(client, ISBN)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("  plain  ", "plain"),
        ({"type": "/type/text", "value": "boxed"}, "boxed"),
        ({"type": "/type/text"}, None),
        (None, None),
        (42, None),
    ],
)
def test_description_text(value, expected):
    assert description_text(value) == expected
