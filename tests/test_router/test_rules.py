"""Tests for the classification rule table."""

import pytest

from swcache.config.schema import RouterConfig
from swcache.router.rules import Route, build_rules, classify
from swcache.types import CacheKind, Credentials, Destination, FetchRequest, RequestMode, Strategy

SITE = "https://modern-jan.com"
ASSETS = "https://r2.modern-jan.com"


@pytest.fixture
def rules():
    return build_rules(RouterConfig())


def _req(url: str, **kwargs) -> FetchRequest:
    return FetchRequest(url=url, **kwargs)


class TestRuleOrder:
    def test_rule_names_in_order(self, rules):
        assert [r.name for r in rules] == [
            "foreign_origin",
            "credentialed",
            "uncacheable_method",
            "image",
            "static_asset",
            "page",
        ]


class TestClassify:
    def test_foreign_origin_bypassed(self, rules):
        result = classify(_req("https://cdn.example.org/a.png", destination=Destination.IMAGE), rules)
        assert result.rule == "foreign_origin"
        assert not result.intercepted

    def test_origin_must_match_exactly(self, rules):
        result = classify(_req("https://evil-r2.modern-jan.com/a.png"), rules)
        assert result.rule == "foreign_origin"

    def test_credentialed_bypassed_for_every_destination(self, rules):
        for dest in Destination:
            result = classify(
                _req(f"{SITE}/x", destination=dest, credentials=Credentials.INCLUDE), rules
            )
            assert result.rule == "credentialed"
            assert result.route.strategy == Strategy.BYPASS

    def test_post_not_intercepted(self, rules):
        result = classify(_req(f"{SITE}/api", method="POST", destination=Destination.DOCUMENT), rules)
        assert result.rule == "uncacheable_method"

    def test_image_destination(self, rules):
        result = classify(_req(f"{SITE}/photo.jpg", destination=Destination.IMAGE), rules)
        assert result.route.strategy == Strategy.CACHE_FIRST
        assert result.route.kind == CacheKind.IMAGE

    def test_trusted_origin_is_image_regardless_of_destination(self, rules):
        result = classify(_req(f"{ASSETS}/data.json", destination=Destination.SCRIPT), rules)
        assert result.rule == "image"
        assert result.route.kind == CacheKind.IMAGE

    def test_image_under_asset_prefix_stays_image(self, rules):
        result = classify(_req(f"{SITE}/_astro/logo.png", destination=Destination.IMAGE), rules)
        assert result.route.kind == CacheKind.IMAGE

    @pytest.mark.parametrize("dest", [Destination.STYLE, Destination.SCRIPT])
    def test_style_and_script(self, rules, dest):
        result = classify(_req(f"{SITE}/x.css", destination=dest), rules)
        assert result.rule == "static_asset"
        assert result.route == Route(Strategy.CACHE_FIRST, CacheKind.STATIC)

    def test_asset_prefix(self, rules):
        result = classify(_req(f"{SITE}/_astro/font.woff2", destination=Destination.FONT), rules)
        assert result.route.kind == CacheKind.STATIC

    def test_navigation(self, rules):
        result = classify(_req(f"{SITE}/blog/", mode=RequestMode.NAVIGATE), rules)
        assert result.route.strategy == Strategy.NETWORK_FIRST
        assert result.route.kind == CacheKind.DYNAMIC

    def test_document_destination(self, rules):
        result = classify(_req(f"{SITE}/blog/", destination=Destination.DOCUMENT), rules)
        assert result.rule == "page"

    def test_unmatched_is_bypassed(self, rules):
        result = classify(_req(f"{SITE}/api/data.json"), rules)
        assert result.rule == "no_match"
        assert not result.intercepted

    def test_custom_config(self):
        cfg = RouterConfig(
            site_origin="http://localhost:4321",
            trusted_asset_origin="https://cdn.example.org",
            asset_path_prefix="/assets/",
        )
        rules = build_rules(cfg)
        assert classify(_req("http://localhost:4321/assets/app.js"), rules).rule == "static_asset"
        assert classify(_req("https://cdn.example.org/a"), rules).rule == "image"
        assert classify(_req(f"{SITE}/blog/", mode=RequestMode.NAVIGATE), rules).rule == (
            "foreign_origin"
        )
