from __future__ import annotations
import httpx
from typing import Any, Dict, NamedTuple, Optional
from .settings import settings


class GeoLookupError(RuntimeError):
	pass


class GeoLocation(NamedTuple):
	country: str
	city: str


class GeoClient:
	def __init__(self, *, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self.base_url = (base_url or settings.geo_lookup_url).rstrip("/")
		self._client = httpx.AsyncClient(timeout=10, transport=transport)

	async def lookup(self, ip: str) -> GeoLocation:
		try:
			r = await self._client.get(f"{self.base_url}/{ip}")
			r.raise_for_status()
		except httpx.HTTPError as err:
			raise GeoLookupError(f"Geo lookup failed for {ip}: {err}") from err
		try:
			data: Dict[str, Any] = r.json()
		except ValueError as err:
			raise GeoLookupError(f"Unexpected geo lookup response: {r.text}") from err
		# ip-api answers 200 with status "fail" for private or malformed addresses
		if data.get("status") == "fail":
			raise GeoLookupError(f"Geo lookup failed for {ip}: {data.get('message', 'unknown error')}")
		return GeoLocation(country=str(data.get("country") or "Unknown"), city=str(data.get("city") or "Unknown"))

	async def aclose(self) -> None:
		await self._client.aclose()


async def get_geo_client():
	client = GeoClient()
	try:
		yield client
	finally:
		await client.aclose()
