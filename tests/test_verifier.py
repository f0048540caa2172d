# File: tests/test_verifier.py
# Test-suite for the concurrent link verifier
from __future__ import annotations

import asyncio
import socket
import ssl
from typing import Dict

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web

from link_guardian.aggregator import EXIT_BROKEN, ScanReport
from link_guardian.checker import (
    Broken,
    DnsError,
    LinkVerifier,
    Ok,
    Other,
    OutcomeKind,
    Redirect,
    Timeout,
    TlsError,
)
from link_guardian.checker.classify import TOO_MANY_REDIRECTS
from link_guardian.crawler.models import Link
from link_guardian.engine import scan_site

from conftest import FakeResponse, FakeSession, html_page, serve_app, status_handler

#: seconds the slow handler sleeps; verifier timeout in these tests is far lower
SLOW_SLEEP: float = 1.0


# --------------------------------------------------------------------------- #
#                                  Fixtures                                   #
# --------------------------------------------------------------------------- #


@pytest.fixture()
def hits() -> Dict[str, int]:
    return {}


@pytest_asyncio.fixture()
async def link_server(unused_tcp_port: int, hits: Dict[str, int]):
    """One route per outcome the verifier has to recognise."""
    app = web.Application()

    def counted(path: str, status: int, location: str | None = None):
        async def handler(_):
            hits[path] = hits.get(path, 0) + 1
            headers = {"Location": location} if location else {}
            return web.Response(status=status, headers=headers)
        return handler

    async def slow(_):
        await asyncio.sleep(SLOW_SLEEP)
        return web.Response(text="late")

    async def head_not_allowed(_):
        hits["HEAD /nohead"] = hits.get("HEAD /nohead", 0) + 1
        return web.Response(status=405)

    async def nohead_get(_):
        hits["GET /nohead"] = hits.get("GET /nohead", 0) + 1
        return web.Response(text="body")

    app.router.add_get("/ok", counted("/ok", 200))
    app.router.add_get("/gone", counted("/gone", 410))
    app.router.add_get("/forbidden", counted("/forbidden", 403))
    app.router.add_get("/error", counted("/error", 500))
    app.router.add_get("/c", counted("/c", 301, "/d"))
    app.router.add_get("/d", counted("/d", 200))
    app.router.add_get("/to-missing", counted("/to-missing", 302, "/missing"))
    app.router.add_get("/loop", counted("/loop", 302, "/loop"))
    app.router.add_get("/slow", slow)
    app.router.add_head("/nohead", head_not_allowed)
    app.router.add_get("/nohead", nohead_get, allow_head=False)

    async for url in serve_app(app, unused_tcp_port):
        yield url


async def verify(config, base: str, *paths: str) -> Dict[str, object]:
    async with LinkVerifier(config) as verifier:
        results = await verifier.check_all([f"{base}{p}" for p in paths])
    return {r.url: r.outcome for r in results}


# --------------------------------------------------------------------------- #
#                         Classification over real HTTP                       #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_status_classification(make_config, link_server):
    outcomes = await verify(make_config(), link_server, "/ok", "/missing", "/gone", "/forbidden", "/error")

    assert outcomes[f"{link_server}/ok"] == Ok(200)
    assert outcomes[f"{link_server}/missing"] == Broken(404)
    assert outcomes[f"{link_server}/gone"] == Broken(410)
    # only 404/410 count as broken
    assert outcomes[f"{link_server}/forbidden"] == Other("HTTP 403", http_status=403)
    assert outcomes[f"{link_server}/error"] == Other("HTTP 500", http_status=500)


@pytest.mark.asyncio()
async def test_redirect_reports_first_status_and_absolute_target(make_config, link_server, hits):
    outcomes = await verify(make_config(), link_server, "/c")

    assert outcomes[f"{link_server}/c"] == Redirect(301, f"{link_server}/d")
    assert hits == {"/c": 1, "/d": 1}


@pytest.mark.asyncio()
async def test_redirect_to_missing_page_is_broken(make_config, link_server):
    outcomes = await verify(make_config(), link_server, "/to-missing")
    assert outcomes[f"{link_server}/to-missing"] == Broken(404)


@pytest.mark.asyncio()
async def test_redirect_not_followed_when_disabled(make_config, link_server, hits):
    outcomes = await verify(make_config(follow_redirects=False), link_server, "/c")

    assert outcomes[f"{link_server}/c"] == Redirect(301, f"{link_server}/d")
    assert "/d" not in hits


@pytest.mark.asyncio()
async def test_redirect_loop_is_bounded(make_config, link_server, hits):
    outcomes = await verify(make_config(max_redirects=5), link_server, "/loop")

    outcome = outcomes[f"{link_server}/loop"]
    assert isinstance(outcome, Other)
    assert outcome.detail == TOO_MANY_REDIRECTS
    # first request plus five followed hops
    assert hits["/loop"] == 6


@pytest.mark.asyncio()
async def test_slow_link_times_out(make_config, link_server):
    config = make_config(timeout=0.3)
    loop = asyncio.get_running_loop()
    started = loop.time()
    outcomes = await verify(config, link_server, "/slow", "/ok")
    elapsed = loop.time() - started

    assert outcomes[f"{link_server}/slow"] == Timeout()
    assert outcomes[f"{link_server}/ok"] == Ok(200)
    assert elapsed < SLOW_SLEEP


@pytest.mark.asyncio()
async def test_head_rejected_falls_back_to_get(make_config, link_server, hits):
    outcomes = await verify(make_config(), link_server, "/nohead")

    assert outcomes[f"{link_server}/nohead"] == Ok(200)
    assert hits == {"HEAD /nohead": 1, "GET /nohead": 1}


# --------------------------------------------------------------------------- #
#                       Transport failures via stub session                   #
# --------------------------------------------------------------------------- #


def raising(exc: BaseException):
    async def handler(method: str, url: str) -> FakeResponse:
        raise exc
    return handler


def dns_failure() -> BaseException:
    try:
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
    except socket.gaierror as cause:
        try:
            raise aiohttp.ClientConnectionError("Cannot connect to host nowhere.invalid") from cause
        except aiohttp.ClientConnectionError as exc:
            return exc


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "exc,expected_kind",
    [
        (ssl.SSLCertVerificationError("certificate verify failed"), OutcomeKind.TLS_ERROR),
        (socket.gaierror(socket.EAI_NONAME, "Name or service not known"), OutcomeKind.DNS_ERROR),
        (dns_failure(), OutcomeKind.DNS_ERROR),
        (aiohttp.ClientOSError("connection reset"), OutcomeKind.OTHER),
        (asyncio.TimeoutError(), OutcomeKind.TIMEOUT),
    ],
)
async def test_transport_errors_become_outcomes(make_config, exc, expected_kind):
    session = FakeSession(raising(exc))
    verifier = LinkVerifier(make_config(), session=session)
    result = await verifier.check_link(Link.create("https://nowhere.invalid/page"))

    assert result.kind is expected_kind
    assert result.message


@pytest.mark.asyncio()
async def test_tls_and_dns_details_are_kept(make_config):
    tls = await LinkVerifier(
        make_config(), session=FakeSession(raising(ssl.SSLCertVerificationError("self-signed certificate")))
    ).check_link(Link.create("https://self-signed.test/"))
    dns = await LinkVerifier(
        make_config(), session=FakeSession(raising(socket.gaierror(-2, "Name or service not known")))
    ).check_link(Link.create("https://nowhere.invalid/"))

    assert isinstance(tls.outcome, TlsError)
    assert "self-signed" in tls.outcome.detail
    assert isinstance(dns.outcome, DnsError)
    assert dns.message.startswith("Could not resolve hostname")


@pytest.mark.asyncio()
async def test_one_failure_does_not_abort_the_batch(make_config):
    async def handler(method: str, url: str) -> FakeResponse:
        if "bad" in url:
            raise aiohttp.ClientOSError("connection reset")
        return FakeResponse(200)

    verifier = LinkVerifier(make_config(), session=FakeSession(handler))
    results = await verifier.check_all(["http://x.test/good", "http://x.test/bad", "http://x.test/also-good"])

    kinds = {r.url: r.kind for r in results}
    assert kinds == {
        "http://x.test/good": OutcomeKind.OK,
        "http://x.test/bad": OutcomeKind.OTHER,
        "http://x.test/also-good": OutcomeKind.OK,
    }


@pytest.mark.asyncio()
async def test_redirect_without_location(make_config):
    session = FakeSession(status_handler({"http://x.test/r": (302, None)}))
    result = await LinkVerifier(make_config(), session=session).check_link(Link.create("http://x.test/r"))
    assert result.outcome == Redirect(302, "http://x.test/r")


# --------------------------------------------------------------------------- #
#                         Concurrency and bookkeeping                         #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_concurrency_ceiling_is_respected(make_config):
    in_flight = 0
    peak = 0

    async def handler(method: str, url: str) -> FakeResponse:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return FakeResponse(200)

    links = [f"http://x.test/{i}" for i in range(40)]
    verifier = LinkVerifier(make_config(), session=FakeSession(handler))
    results = await verifier.check_all(links, concurrency_limit=5)

    assert len(results) == 40
    assert peak == 5


@pytest.mark.asyncio()
async def test_duplicates_are_probed_once(make_config):
    session = FakeSession(status_handler({"http://x.test/a": (200, None), "http://x.test/b": (200, None)}))
    verifier = LinkVerifier(make_config(), session=session)
    results = await verifier.check_all(["http://x.test/a", "http://X.test/a#frag", "http://x.test/b"])

    assert sorted(r.url for r in results) == ["http://x.test/a", "http://x.test/b"]
    assert len(session.calls) == 2


@pytest.mark.asyncio()
async def test_rerun_yields_identical_results(make_config):
    table = {
        "http://x.test/a": (200, None),
        "http://x.test/b": (301, "/a"),
        "http://x.test/c": (410, None),
    }
    verifier = LinkVerifier(make_config(), session=FakeSession(status_handler(table)))
    links = [Link.create(u) for u in table]

    first = await verifier.check_all(links)
    second = await verifier.check_all(links)

    assert {(r.url, r.outcome) for r in first} == {(r.url, r.outcome) for r in second}
    assert len(first) == len(links)


@pytest.mark.asyncio()
async def test_session_is_required(make_config):
    verifier = LinkVerifier(make_config())
    with pytest.raises(RuntimeError):
        await verifier.check_all(["http://x.test/"])


# --------------------------------------------------------------------------- #
#                                 End-to-end                                  #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_site_scan_end_to_end(make_config, unused_tcp_port: int):
    app = web.Application()

    async def root(_):
        return web.Response(text=html_page("/a", "/b", "/c"), content_type="text/html")

    async def ok(_):
        return web.Response(text="fine")

    async def moved(_):
        return web.Response(status=301, headers={"Location": "/d"})

    app.router.add_get("/", root)
    app.router.add_get("/a", ok)
    app.router.add_get("/c", moved)
    app.router.add_get("/d", ok)

    async for base in serve_app(app, unused_tcp_port):
        report = await scan_site(make_config(max_depth=1), f"{base}/")

    assert isinstance(report, ScanReport)
    summary = report.summary
    assert (summary.ok, summary.broken, summary.redirect, summary.total) == (1, 1, 1, 3)
    by_url = {r.url: r.outcome for r in report.results}
    assert by_url[f"{base}/b"] == Broken(404)
    assert by_url[f"{base}/c"] == Redirect(301, f"{base}/d")
    assert report.pages_visited == 1
    assert report.exit_code == EXIT_BROKEN


# --------------------------------------------------------------------------- #
#                        Edge cases of input and redirects                    #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_chain_ending_without_location_reports_first_status(make_config):
    table = {
        "http://x.test/start": (301, "/next"),
        "http://x.test/next": (302, None),
    }
    session = FakeSession(status_handler(table))
    result = await LinkVerifier(make_config(), session=session).check_link(Link.create("http://x.test/start"))

    assert result.outcome == Redirect(301, "http://x.test/next")
    assert len(session.calls) == 2


@pytest.mark.asyncio()
@pytest.mark.parametrize("limit", [0, -1])
async def test_explicit_non_positive_limit_is_rejected(make_config, limit):
    session = FakeSession(status_handler({}))
    verifier = LinkVerifier(make_config(), session=session)
    with pytest.raises(ValueError):
        await verifier.check_all(["http://x.test/"], concurrency_limit=limit)
    assert session.calls == []


@pytest.mark.asyncio()
@pytest.mark.skipif(not socket.has_ipv6, reason="IPv6 is not available")
async def test_ipv6_literal_link(make_config, unused_tcp_port: int):
    app = web.Application()

    async def ok(_):
        return web.Response(text="v6")

    app.router.add_get("/x", ok)

    async for base in serve_app(app, unused_tcp_port, host="::1"):
        outcomes = await verify(make_config(), base, "/x", "/nope")

    assert base.startswith("http://[::1]:")
    assert outcomes == {f"{base}/x": Ok(200), f"{base}/nope": Broken(404)}
