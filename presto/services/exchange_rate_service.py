"""
Service de taux de change / Exchange rate service.

Table de taux pivotée sur l'USD, rafraîchie en tâche de fond (une seule tâche,
nouvel essai plus tôt après un échec). Les conversions lisent uniquement le
dernier instantané valide : jamais d'appel réseau sur le chemin d'une requête.
USD-pivoted rate table refreshed by a single background task. Conversions only
read the last good snapshot and never hit the network.
"""

import asyncio
import logging
from collections.abc import Mapping

import httpx

from presto.config import settings
from presto.exceptions import ConversionUnavailableError

logger = logging.getLogger(__name__)


class ExchangeRateService:
    """Convertisseur de devises à durée de vie explicite / Currency converter with explicit lifetime.

    Créé au démarrage (lifespan FastAPI), arrêté à l'extinction. Construit avec
    `rates=...`, il sert un barème fixe (tests) sans réseau.
    """

    def __init__(
        self,
        url: str | None = None,
        refresh_interval: float | None = None,
        retry_interval: float | None = None,
        timeout: float | None = None,
        rates: Mapping[str, float] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url or settings.EXCHANGE_RATE_URL
        self.refresh_interval = refresh_interval or settings.EXCHANGE_RATE_REFRESH_SECONDS
        self.retry_interval = retry_interval or settings.EXCHANGE_RATE_RETRY_SECONDS
        self._timeout = timeout or settings.EXCHANGE_RATE_TIMEOUT_SECONDS

        self._rates: dict[str, float] | None = None
        if rates is not None:
            self._rates = {"USD": 1.0, **{code.upper(): float(r) for code, r in rates.items()}}

        self._client = client
        self._owns_client = client is None
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()

    # === Cycle de vie / Lifecycle ===

    async def start(self) -> None:
        """Premier chargement immédiat puis boucle de fond / Eager fetch, then background loop."""
        if self._task is not None:
            return
        if not await self.refresh():
            logger.warning("Exchange rates unavailable at startup, conversions will fail until next refresh")
        self._task = asyncio.create_task(self._refresh_loop(), name="exchange-rate-refresh")

    async def stop(self) -> None:
        """Arrêter la tâche de fond et fermer le client HTTP / Stop the loop and close the HTTP client."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def rates(self) -> dict[str, float] | None:
        """Dernier instantané valide (copie) / Last good snapshot (copy)."""
        return dict(self._rates) if self._rates is not None else None

    async def _refresh_loop(self) -> None:
        ok = self._rates is not None
        while True:
            await asyncio.sleep(self.refresh_interval if ok else self.retry_interval)
            try:
                ok = await self.refresh()
            except Exception:
                logger.exception("Unexpected error during exchange rate refresh")
                ok = False

    async def refresh(self) -> bool:
        """Recharger les taux ; conserve l'ancien instantané en cas d'échec / Reload rates, keep old snapshot on failure."""
        async with self._lock:
            try:
                self._rates = await self._fetch_rates()
            except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
                logger.warning("Exchange rate refresh failed: %s", exc)
                return False
        logger.info("Exchange rates refreshed (%d currencies)", len(self._rates))
        return True

    async def _fetch_rates(self) -> dict[str, float]:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        response = await self._client.get(self.url)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, Mapping) or not isinstance(data.get("rates"), Mapping):
            raise ValueError("Malformed exchange rate payload: missing rates mapping")
        rates = {code.upper(): float(rate) for code, rate in data["rates"].items()}
        return {"USD": 1.0, **rates}

    # === Conversion ===

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convertir via le pivot USD / Convert through the USD pivot.

        Lève ConversionUnavailableError si un taux manque : jamais de montant
        non converti renvoyé silencieusement.
        """
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()
        if from_currency == to_currency or amount == 0:
            return amount

        if self._rates is None:
            raise ConversionUnavailableError("Exchange rates unavailable: not yet loaded")

        usd_to_source = self._rates.get(from_currency)
        usd_to_target = self._rates.get(to_currency)
        if not usd_to_source:
            raise ConversionUnavailableError(f"Exchange rate unavailable for currency: {from_currency}")
        if not usd_to_target:
            raise ConversionUnavailableError(f"Exchange rate unavailable for currency: {to_currency}")

        return amount * (usd_to_target / usd_to_source)
