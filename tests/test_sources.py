"""
Tests for the wiki and databank image sources.
"""

from starchart.cascade import first_hit
from starchart.config import DEFAULT_DATABANK_BASE as DATABANK, DEFAULT_WIKI_API
from starchart.http import FetchError
from starchart.sources.databank import extract_databank_image, fetch_databank_image
from starchart.sources.wiki import (
    fetch_wiki_image,
    page_image,
    search_titles,
    title_candidates,
)


def _titles_requested(client):
    return [p["titles"] for k, url, p in client.calls if "titles" in p]


class TestFirstHit:
    """Test the short-circuit evaluator."""

    def test_returns_first_non_empty(self):
        calls = []

        def attempt(value):
            def run():
                calls.append(value)
                return value
            return run

        assert first_hit([attempt(""), attempt("b"), attempt("c")]) == "b"
        assert calls == ["", "b"]

    def test_failures_are_swallowed(self):
        def boom():
            raise FetchError("down")

        assert first_hit([boom, lambda: "ok"]) == "ok"

    def test_exhausted_returns_empty(self):
        assert first_hit([lambda: "", lambda: None]) == ""
        assert first_hit([]) == ""

    def test_lazy_generator(self):
        produced = []

        def attempts():
            for v in ["x", "y"]:
                produced.append(v)
                yield lambda v=v: v

        assert first_hit(attempts()) == "x"
        assert produced == ["x"]


class TestWikiLookup:
    """Test title-based wiki lookup."""

    def test_title_candidates_order(self):
        assert title_candidates("X-wing") == [
            "X-wing",
            "X-wing (starship)",
            "X-wing (starship class)",
            "X-wing (Star Wars)",
        ]

    def test_page_image_prefers_thumbnail(self, fake_client):
        data = {"query": {"pages": {"7": {
            "thumbnail": {"source": "https://img/thumb.png"},
            "original": {"source": "https://img/orig.png"},
        }}}}
        fake_client.get_json = lambda url, params=None, source="http": data
        assert page_image(fake_client, DEFAULT_WIKI_API, "X-wing") == "https://img/thumb.png"

    def test_page_image_falls_back_to_original(self, fake_client):
        data = {"query": {"pages": {"7": {"original": {"source": "https://img/orig.png"}}}}}
        fake_client.get_json = lambda url, params=None, source="http": data
        assert page_image(fake_client, DEFAULT_WIKI_API, "X-wing") == "https://img/orig.png"

    def test_page_image_missing_page(self, fake_client):
        assert page_image(fake_client, DEFAULT_WIKI_API, "Nope") == ""

    def test_bare_name_hit_stops_early(self, fake_client):
        fake_client.wiki_pages["X-wing"] = "https://img/xwing.png"
        assert fetch_wiki_image(fake_client, "X-wing") == "https://img/xwing.png"
        assert _titles_requested(fake_client) == ["X-wing"]

    def test_later_title_variant(self, fake_client):
        fake_client.wiki_pages["Executor (starship)"] = "https://img/executor.png"
        assert fetch_wiki_image(fake_client, "Executor") == "https://img/executor.png"
        assert _titles_requested(fake_client) == ["Executor", "Executor (starship)"]

    def test_failed_title_lookup_tries_next(self, fake_client):
        fake_client.wiki_pages["Slave 1"] = FetchError("timeout")
        fake_client.wiki_pages["Slave 1 (starship class)"] = "https://img/slave.png"
        assert fetch_wiki_image(fake_client, "Slave 1") == "https://img/slave.png"

    def test_search_fallback(self, fake_client):
        fake_client.wiki_search["incategory:Starships Imperial shuttle"] = [
            "Lambda-class T-4a shuttle",
            "Imperial shuttle (disambiguation)",
        ]
        fake_client.wiki_pages["Imperial shuttle (disambiguation)"] = "https://img/shuttle.png"
        assert fetch_wiki_image(fake_client, "Imperial shuttle") == "https://img/shuttle.png"

    def test_search_error_moves_to_next_query(self, fake_client):
        fake_client.wiki_search["incategory:Starships EF76"] = FetchError("500")
        fake_client.wiki_search["EF76 starship"] = ["EF76 Nebulon-B escort frigate"]
        fake_client.wiki_pages["EF76 Nebulon-B escort frigate"] = "https://img/nebulon.png"
        assert fetch_wiki_image(fake_client, "EF76") == "https://img/nebulon.png"

    def test_search_titles_limit(self, fake_client):
        fake_client.wiki_search["q"] = [f"T{i}" for i in range(8)]
        assert search_titles(fake_client, DEFAULT_WIKI_API, "q") == ["T0", "T1", "T2", "T3", "T4"]
        assert fake_client.calls[-1][2]["srlimit"] == 5

    def test_nothing_found(self, fake_client):
        assert fetch_wiki_image(fake_client, "Unknown craft") == ""


class TestDatabankLookup:
    """Test slug-based databank lookup."""

    def test_extract_first_cdn_url(self, databank_html):
        assert extract_databank_image(databank_html) == (
            "https://lumiere-a.akamaihd.net/v1/images/x-wing_fighter_1920x1080.jpeg"
            "?region=0%2C0%2C1536%2C864"
        )

    def test_extract_ignores_other_hosts(self):
        html = '<img src="https://cdn.example.com/lumiere-a.png">'
        assert extract_databank_image(html) == ""

    def test_extract_stops_at_paren(self):
        html = "background:url(https://LUMIERE-A.akamaihd.net/v1/a.jpg)"
        assert extract_databank_image(html) == "https://LUMIERE-A.akamaihd.net/v1/a.jpg"

    def test_override_slug_used(self, fake_client, databank_html):
        fake_client.text_routes[f"{DATABANK}x-wing-starfighter"] = databank_html
        assert fetch_databank_image(fake_client, "X-wing").startswith("https://lumiere-a.akamaihd.net/")
        assert fake_client.urls("text") == [f"{DATABANK}x-wing-starfighter"]

    def test_falls_back_to_stripped_candidate(self, fake_client, databank_html):
        fake_client.text_routes[f"{DATABANK}y-wing"] = databank_html
        assert fetch_databank_image(fake_client, "Y-wing")
        assert fake_client.urls("text") == [
            f"{DATABANK}y-wing-starfighter",
            f"{DATABANK}y-wing",
        ]

    def test_page_without_image_tries_next(self, fake_client, databank_html):
        fake_client.text_routes[f"{DATABANK}droid-tri-fighter"] = "<html>no image</html>"
        fake_client.text_routes[f"{DATABANK}droid-tri"] = databank_html
        assert fetch_databank_image(fake_client, "Droid tri-fighter")

    def test_all_candidates_fail(self, fake_client):
        assert fetch_databank_image(fake_client, "Sentinel-class landing craft") == ""
