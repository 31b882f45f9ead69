# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the client runtime fragment loader."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from prerender.client import (
    LazyFragmentLoader,
    LoaderConfig,
    ManualResourceTimeline,
    ManualViewport,
    ResourceEntry,
    SoupDocument,
    create_lazy_loader,
)
from prerender.errors import FragmentNotFoundError, NetworkFailure, TargetNotFoundError

Route = httpx.Response | list[httpx.Response] | Callable[[httpx.Request], httpx.Response]

FOOTER_HTML = '<footer class="p-4">Footer</footer>'
PAGE = '<html><head></head><body><div id="footer"></div><div id="hero"></div></body></html>'


class _Server:
    """In-memory HTTP endpoint recording every requested path."""

    def __init__(self, routes: dict[str, Route]) -> None:
        self.routes = routes
        self.calls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request.url.path)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404)
        if isinstance(route, list):
            return route.pop(0) if len(route) > 1 else route[0]
        if callable(route):
            return route(request)
        return route

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), base_url="http://test")

    def count(self, path: str) -> int:
        return self.calls.count(path)


class _Sleeper:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _loader(server: _Server, config: LoaderConfig | None = None, **kwargs: Any) -> LazyFragmentLoader:
    kwargs.setdefault("sleep", _Sleeper())
    return LazyFragmentLoader(config or LoaderConfig(), client=server.client(), **kwargs)


def _default_server(**extra: Route) -> _Server:
    routes: dict[str, Route] = {
        "/prerendered/Footer.html": httpx.Response(200, text=FOOTER_HTML),
        "/prerendered/lazy-components.css": httpx.Response(200, text=".p-4{}"),
    }
    routes.update(extra)
    return _Server(routes)


@pytest.mark.asyncio
async def test_load_fetches_once_then_serves_from_cache() -> None:
    server = _default_server()
    document = SoupDocument(PAGE)
    loads: list[tuple[str, bool]] = []
    config = LoaderConfig(on_load=lambda name, record: loads.append((name, record.from_cache)))
    loader = _loader(server, config, document=document)

    assert await loader.load("Footer") == FOOTER_HTML
    calls_after_first = list(server.calls)
    assert await loader.load("Footer") == FOOTER_HTML

    assert server.calls == calls_after_first
    assert server.count("/prerendered/lazy-components.css") == 1
    assert document.stylesheets() == ["/prerendered/lazy-components.css"]
    stats = loader.get_stats()
    assert (stats.total_loads, stats.cache_hits, stats.cache_misses, stats.errors) == (2, 1, 1, 0)
    assert stats.total_bytes == len(FOOTER_HTML)
    assert loads == [("Footer", False), ("Footer", True)]
    await loader.aclose()


@pytest.mark.asyncio
async def test_retry_recovers_with_linear_backoff() -> None:
    server = _default_server(
        **{
            "/prerendered/Footer.html": [
                httpx.Response(503),
                httpx.Response(502),
                httpx.Response(200, text=FOOTER_HTML),
            ],
        },
    )
    sleeper = _Sleeper()
    loader = _loader(server, LoaderConfig(retry_delay=0.25), sleep=sleeper)

    assert await loader.load("Footer") == FOOTER_HTML
    assert server.count("/prerendered/Footer.html") == 3
    assert sleeper.delays == [0.25, 0.5]


@pytest.mark.asyncio
async def test_retry_exhaustion_raises_network_failure() -> None:
    server = _default_server(**{"/prerendered/Footer.html": httpx.Response(500)})
    errors: list[tuple[str, Exception]] = []
    loader = _loader(server, LoaderConfig(max_retries=3, on_error=lambda name, exc: errors.append((name, exc))))

    with pytest.raises(NetworkFailure) as excinfo:
        await loader.load("Footer")

    assert excinfo.value.status_code == 500
    assert server.count("/prerendered/Footer.html") == 3
    assert loader.get_stats().errors == 1
    assert errors and errors[0][0] == "Footer"


@pytest.mark.asyncio
async def test_transport_errors_are_retried() -> None:
    attempts = {"count": 0}

    def flaky(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, text=FOOTER_HTML)

    loader = _loader(_default_server(**{"/prerendered/Footer.html": flaky}))

    assert await loader.load("Footer") == FOOTER_HTML
    assert attempts["count"] == 2


@pytest.mark.asyncio
async def test_not_found_is_not_retried() -> None:
    server = _default_server()
    loader = _loader(server)

    with pytest.raises(FragmentNotFoundError):
        await loader.load("Missing")

    assert server.count("/prerendered/Missing.html") == 1


@pytest.mark.asyncio
async def test_disabled_retry_makes_single_attempt() -> None:
    server = _default_server(**{"/prerendered/Footer.html": httpx.Response(503)})
    loader = _loader(server, LoaderConfig(enable_retry=False))

    with pytest.raises(NetworkFailure):
        await loader.load("Footer")

    assert server.count("/prerendered/Footer.html") == 1


@pytest.mark.asyncio
async def test_stylesheet_failure_does_not_fail_load() -> None:
    server = _default_server(**{"/prerendered/lazy-components.css": httpx.Response(404)})
    loader = _loader(server)

    assert await loader.load("Footer") == FOOTER_HTML
    assert loader.get_stats().errors == 0


@pytest.mark.asyncio
async def test_css_modules_load_base_and_component_stylesheets() -> None:
    server = _default_server(
        **{
            "/prerendered/manifest.json": httpx.Response(200, json={"components": {"Footer": "components/Footer.css"}}),
            "/prerendered/base.css": httpx.Response(200, text=".p-4{}"),
            "/prerendered/components/Footer.css": httpx.Response(200, text="footer{}"),
            "/prerendered/Hero.html": httpx.Response(200, text="<section>Hero</section>"),
        },
    )
    document = SoupDocument(PAGE)
    css_loads: list[str] = []
    config = LoaderConfig(css_modules=True, on_css_load=lambda url, _duration: css_loads.append(url))
    loader = _loader(server, config, document=document)

    await loader.preload_batch(["Footer", "Hero"])

    assert document.stylesheets() == ["/prerendered/base.css", "/prerendered/components/Footer.css"]
    assert server.count("/prerendered/manifest.json") == 1
    assert server.count("/prerendered/base.css") == 1
    assert server.count("/prerendered/lazy-components.css") == 0
    assert css_loads[0] == "/prerendered/manifest.json"


@pytest.mark.asyncio
async def test_manifest_failure_degrades_to_legacy_css() -> None:
    server = _default_server(**{"/prerendered/manifest.json": httpx.Response(500)})
    document = SoupDocument(PAGE)
    loader = _loader(server, LoaderConfig(css_modules=True, max_retries=2), document=document)

    assert await loader.load("Footer") == FOOTER_HTML

    assert not loader.css_modules
    assert server.count("/prerendered/manifest.json") == 2
    assert document.stylesheets() == ["/prerendered/lazy-components.css"]

    loader.clear_cache()
    await loader.load("Footer")
    assert server.count("/prerendered/manifest.json") == 2


@pytest.mark.asyncio
async def test_component_css_backoff_does_not_block_other_loads() -> None:
    server = _default_server(
        **{
            "/prerendered/manifest.json": httpx.Response(200, json={"components": {"Footer": "components/Footer.css"}}),
            "/prerendered/base.css": httpx.Response(200, text=".p-4{}"),
            "/prerendered/components/Footer.css": [httpx.Response(503), httpx.Response(200, text="footer{}")],
            "/prerendered/Hero.html": httpx.Response(200, text="<section>Hero</section>"),
        },
    )
    gate = asyncio.Event()

    async def gated_sleep(_delay: float) -> None:
        await gate.wait()

    loader = _loader(server, LoaderConfig(css_modules=True), sleep=gated_sleep)
    footer = asyncio.ensure_future(loader.load("Footer"))
    for _ in range(200):
        if server.count("/prerendered/components/Footer.css"):
            break
        await asyncio.sleep(0)
    assert server.count("/prerendered/components/Footer.css") == 1

    hero = await asyncio.wait_for(loader.load("Hero"), timeout=1.0)

    assert hero == "<section>Hero</section>"
    assert not footer.done()
    gate.set()
    assert await footer == FOOTER_HTML
    assert server.count("/prerendered/components/Footer.css") == 2
    assert server.count("/prerendered/base.css") == 1


@pytest.mark.asyncio
async def test_failed_stylesheet_is_fetched_again_by_a_later_load() -> None:
    server = _default_server(
        **{
            "/prerendered/lazy-components.css": [httpx.Response(404), httpx.Response(200, text=".p-4{}")],
            "/prerendered/Hero.html": httpx.Response(200, text="<section>Hero</section>"),
        },
    )
    document = SoupDocument(PAGE)
    loader = _loader(server, document=document)

    await loader.load("Footer")
    assert document.stylesheets() == []

    await loader.load("Hero")
    assert server.count("/prerendered/lazy-components.css") == 2
    assert document.stylesheets() == ["/prerendered/lazy-components.css"]


@pytest.mark.asyncio
async def test_zero_attempt_budget_still_makes_one_request() -> None:
    server = _default_server(**{"/prerendered/Footer.html": httpx.Response(500)})
    config = LoaderConfig()
    config.max_retries = 0
    loader = _loader(server, config)

    with pytest.raises(NetworkFailure):
        await loader.load("Footer")

    assert server.count("/prerendered/Footer.html") == 1


@pytest.mark.asyncio
async def test_concurrent_loads_share_one_fetch() -> None:
    server = _default_server()
    loader = _loader(server, LoaderConfig(cache_html=False))

    results = await asyncio.gather(loader.load("Footer"), loader.load("Footer"))

    assert results == [FOOTER_HTML, FOOTER_HTML]
    assert server.count("/prerendered/Footer.html") == 1


@pytest.mark.asyncio
async def test_inject_writes_into_target() -> None:
    document = SoupDocument(PAGE)
    loader = _loader(_default_server(), document=document)

    await loader.inject("Footer", "#footer")

    target = document.query("#footer")
    assert target is not None
    assert target.decode_contents() == FOOTER_HTML


@pytest.mark.asyncio
async def test_inject_missing_target_reports_error() -> None:
    errors: list[Exception] = []
    loader = _loader(
        _default_server(),
        LoaderConfig(on_error=lambda _name, exc: errors.append(exc)),
        document=SoupDocument(PAGE),
    )

    with pytest.raises(TargetNotFoundError):
        await loader.inject("Footer", "#absent")

    assert isinstance(errors[0], TargetNotFoundError)


@pytest.mark.asyncio
async def test_observe_and_load_waits_for_viewport() -> None:
    server = _default_server()
    document = SoupDocument(PAGE)
    viewport = ManualViewport()
    loader = _loader(server, document=document, viewport=viewport)

    await loader.observe_and_load("Footer", "#footer")
    assert server.calls == []
    assert viewport.active == 1

    target = document.query("#footer")
    assert viewport.reveal(target) == 1
    await loader.settle()

    assert target.decode_contents() == FOOTER_HTML
    assert viewport.active == 0
    assert viewport.reveal(target) == 0


@pytest.mark.asyncio
async def test_observe_and_load_swallows_failures() -> None:
    errors: list[str] = []
    document = SoupDocument(PAGE)
    loader = _loader(
        _default_server(),
        LoaderConfig(on_error=lambda name, _exc: errors.append(name)),
        document=document,
    )

    await loader.observe_and_load("Missing", "#hero")

    assert errors == ["Missing"]
    assert document.query("#hero").decode_contents() == ""


@pytest.mark.asyncio
async def test_disconnect_all_cancels_pending_observers() -> None:
    viewport = ManualViewport()
    server = _default_server()
    loader = _loader(server, document=SoupDocument(PAGE), viewport=viewport)

    await loader.observe_and_load("Footer", "#footer")
    loader.disconnect_all()

    assert viewport.active == 0
    assert server.calls == []


@pytest.mark.asyncio
async def test_secondary_assets_are_recorded_within_window() -> None:
    timeline = ManualResourceTimeline()
    timeline.record(ResourceEntry(name="/old.png", start_time=1.0, transfer_size=999))
    loader = _loader(_default_server(), resources=timeline, clock=lambda: 10.0)

    await loader.load("Footer")
    timeline.record(ResourceEntry(name="/logo.png", start_time=10.2, duration=12.0, initiator_type="img", transfer_size=2048))

    record = loader.get_detailed_history()[0]
    assert [asset.url for asset in record.secondary_assets] == ["/logo.png"]
    assert loader.get_stats().total_bytes == len(FOOTER_HTML) + 2048
    loader.reset()


@pytest.mark.asyncio
async def test_reset_clears_stats_history_and_caches() -> None:
    server = _default_server()
    loader = _loader(server)
    await loader.load("Footer")

    loader.reset()
    await loader.load("Footer")

    assert loader.get_stats().total_loads == 1
    assert loader.get_stats().cache_hits == 0
    assert server.count("/prerendered/Footer.html") == 2
    assert server.count("/prerendered/lazy-components.css") == 2
    assert [record.component_name for record in loader.get_detailed_history()] == ["Footer"]


@pytest.mark.asyncio
async def test_create_lazy_loader_uses_origin() -> None:
    loader = create_lazy_loader(LoaderConfig(base_url="/fragments/"), origin="http://example.test")

    assert loader.config.base_url == "/fragments"
    assert loader.config.legacy_css_url == "/fragments/lazy-components.css"
    await loader.aclose()
