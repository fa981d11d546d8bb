"""Tests du service de taux de change / Exchange rate service tests."""

import asyncio

import httpx
import pytest

from presto.exceptions import ConversionUnavailableError
from presto.services.exchange_rate_service import ExchangeRateService


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def _wait_for(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            return False
        await asyncio.sleep(0.01)
    return True


def test_convert_through_usd_pivot():
    service = ExchangeRateService(rates={"EUR": 0.5, "GBP": 0.25})
    assert service.convert(100, "USD", "EUR") == pytest.approx(50)
    assert service.convert(100, "EUR", "USD") == pytest.approx(200)
    assert service.convert(100, "EUR", "GBP") == pytest.approx(50)


def test_same_currency_and_zero_need_no_rates():
    service = ExchangeRateService()
    assert service.convert(123.4, "EUR", "EUR") == 123.4
    assert service.convert(0, "EUR", "GBP") == 0


def test_convert_without_rates_fails():
    service = ExchangeRateService()
    with pytest.raises(ConversionUnavailableError):
        service.convert(100, "EUR", "GBP")


def test_convert_unknown_currency_fails():
    service = ExchangeRateService(rates={"EUR": 0.5})
    with pytest.raises(ConversionUnavailableError):
        service.convert(100, "EUR", "JPY")
    with pytest.raises(ConversionUnavailableError):
        service.convert(100, "XYZ", "EUR")


async def test_refresh_loads_rates():
    def handler(request):
        assert request.url.params["base"] == "USD"
        return httpx.Response(200, json={"base": "USD", "rates": {"EUR": 0.9, "GBP": 0.8}})

    service = ExchangeRateService(
        url="https://rates.test/latest?base=USD", client=_mock_client(handler),
    )
    assert await service.refresh() is True
    assert service.rates == {"USD": 1.0, "EUR": 0.9, "GBP": 0.8}
    assert service.convert(90, "EUR", "USD") == pytest.approx(100)


async def test_failed_refresh_keeps_last_snapshot():
    responses = iter([
        httpx.Response(200, json={"rates": {"EUR": 0.9}}),
        httpx.Response(503),
    ])

    service = ExchangeRateService(url="https://rates.test/latest", client=_mock_client(lambda r: next(responses)))
    assert await service.refresh() is True
    assert await service.refresh() is False
    assert service.rates["EUR"] == 0.9


async def test_malformed_payload_is_a_failed_refresh():
    service = ExchangeRateService(
        url="https://rates.test/latest", client=_mock_client(lambda r: httpx.Response(200, json={"oops": 1})),
    )
    assert await service.refresh() is False
    assert service.rates is None


async def test_start_and_stop():
    client = _mock_client(lambda r: httpx.Response(200, json={"rates": {"EUR": 0.9}}))
    service = ExchangeRateService(url="https://rates.test/latest", refresh_interval=3600, client=client)
    await service.start()
    assert service.is_running
    assert service.rates["EUR"] == 0.9
    await service.stop()
    assert not service.is_running
    await client.aclose()


async def test_start_survives_unreachable_provider():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = _mock_client(handler)
    service = ExchangeRateService(url="https://rates.test/latest", retry_interval=3600, client=client)
    await service.start()
    assert service.is_running
    with pytest.raises(ConversionUnavailableError):
        service.convert(10, "EUR", "GBP")
    await service.stop()
    await client.aclose()


@pytest.mark.parametrize("payload", [{"rates": None}, {"rates": [1, 2]}, ["EUR", 0.9]])
async def test_rates_not_a_mapping_is_a_failed_refresh(payload):
    service = ExchangeRateService(
        url="https://rates.test/latest", client=_mock_client(lambda r: httpx.Response(200, json=payload)),
    )
    assert await service.refresh() is False
    assert service.rates is None


async def test_loop_survives_malformed_payload():
    responses = iter([
        httpx.Response(200, json={"rates": {"EUR": 0.9}}),
        httpx.Response(200, json={"rates": None}),
    ])

    def handler(request):
        return next(responses, httpx.Response(200, json={"rates": {"EUR": 0.8}}))

    client = _mock_client(handler)
    service = ExchangeRateService(
        url="https://rates.test/latest", refresh_interval=0.01, retry_interval=0.01, client=client,
    )
    await service.start()
    assert await _wait_for(lambda: service.rates["EUR"] == 0.8)
    assert service.is_running
    await service.stop()
    await client.aclose()


async def test_loop_survives_unexpected_error():
    client = _mock_client(lambda r: httpx.Response(200, json={"rates": {"EUR": 0.9}}))
    service = ExchangeRateService(
        url="https://rates.test/latest", refresh_interval=0.01, retry_interval=0.01, client=client,
    )
    calls = 0
    fetch = service._fetch_rates

    async def flaky_fetch():
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("boom")
        return await fetch()

    service._fetch_rates = flaky_fetch
    service._task = asyncio.create_task(service._refresh_loop())
    assert await _wait_for(lambda: service.rates is not None)
    assert service.is_running
    await service.stop()
    await client.aclose()


async def test_loop_retries_sooner_after_failure():
    calls = 0

    def handler(request):
        nonlocal calls
        calls += 1
        if calls == 1:
            return httpx.Response(503)
        return httpx.Response(200, json={"rates": {"EUR": 0.9}})

    client = _mock_client(handler)
    service = ExchangeRateService(
        url="https://rates.test/latest", refresh_interval=3600, retry_interval=0.01, client=client,
    )
    await service.start()
    assert service.rates is None
    assert await _wait_for(lambda: service.rates is not None)
    assert calls == 2
    await service.stop()
    await client.aclose()
