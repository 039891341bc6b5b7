"""Tests for the public analyze() entry point."""

import threading

import pytest

from hotspot_lens import analyze
from hotspot_lens.config import HotspotConfig
from hotspot_lens.exceptions import AnalysisCancelledError, InvalidTimeWindowError


@pytest.fixture
def opened(patch_open_source, live_source):
    return patch_open_source(live_source)


class TestAnalyze:
    def test_defaults_from_config(self, opened, live_source):
        result = analyze("acme/app", use_cache=False)
        assert result.ref == "HEAD"
        assert result.time_window == 30
        assert [f.path for f in result.files] == ["foo.ts"]
        assert result.files[0].hotspot_score == 92.0
        assert live_source.list_calls[0][0] == "HEAD"

    def test_explicit_arguments(self, opened):
        result = analyze("acme/app", ref="main", time_window=90, use_cache=False)
        assert result.ref == "main"
        assert {f.path for f in result.files} == {"foo.ts", "bar.ts"}

    def test_overrides_reach_config(self, opened):
        analyze("acme/app", use_cache=False, workers=3, default_ref="dev")
        _, config, source_type = opened[0]
        assert config.workers == 3
        assert config.default_ref == "dev"
        assert source_type == "auto"

    def test_prebuilt_config(self, opened):
        config = HotspotConfig(default_time_window=7, cache_enabled=False)
        result = analyze("acme/app", config=config, source_type="github")
        assert result.time_window == 7
        assert opened[0][1] is config
        assert opened[0][2] == "github"

    def test_cache_hit_skips_source(self, opened, live_source, tmp_path):
        config = HotspotConfig(cache_dir=str(tmp_path / "cache"))
        first = analyze("acme/app", config=config)
        fetched = list(live_source.fetched)
        second = analyze("acme/app", config=config)
        assert second == first
        assert live_source.fetched == fetched

    def test_cache_bypassed(self, opened, live_source, tmp_path):
        config = HotspotConfig(cache_dir=str(tmp_path / "cache"))
        analyze("acme/app", config=config)
        analyze("acme/app", config=config, use_cache=False)
        assert len(live_source.fetched) == 4

    def test_cache_keyed_by_window(self, opened, tmp_path):
        config = HotspotConfig(cache_dir=str(tmp_path / "cache"))
        narrow = analyze("acme/app", time_window=30, config=config)
        wide = analyze("acme/app", time_window=90, config=config)
        assert len(wide.files) > len(narrow.files)

    def test_invalid_window(self, opened):
        with pytest.raises(InvalidTimeWindowError):
            analyze("acme/app", time_window=0, use_cache=False)

    def test_cancel(self, opened):
        event = threading.Event()
        event.set()
        with pytest.raises(AnalysisCancelledError):
            analyze("acme/app", use_cache=False, cancel_event=event)

    def test_progress(self, opened):
        seen = []
        analyze("acme/app", use_cache=False, progress=lambda done, total: seen.append(done))
        assert seen == [1, 2]

    def test_cache_keyed_by_location(self, monkeypatch, live_source, tmp_path):
        """The same owner/name on two GitHub hosts gets two cache entries."""
        import hotspot_lens.api as api_module

        class HostedSource(type(live_source)):
            def __init__(self, api_url):
                super().__init__(live_source.commits, live_source.changes)
                self.api_url = api_url

            @property
            def location(self):
                return self.api_url

        opened_sources = []

        def fake_open_source(repo, config, source_type="auto"):
            opened_sources.append(HostedSource(config.github_api_url))
            return opened_sources[-1]

        monkeypatch.setattr(api_module, "open_source", fake_open_source)
        cache_dir = str(tmp_path / "cache")
        public = HotspotConfig(cache_dir=cache_dir)
        enterprise = HotspotConfig(cache_dir=cache_dir, github_api_url="https://ghe.example.test/api/v3")

        analyze("acme/app", config=public)
        analyze("acme/app", config=enterprise)
        analyze("acme/app", config=public)

        assert [len(s.fetched) for s in opened_sources] == [2, 2, 0]
