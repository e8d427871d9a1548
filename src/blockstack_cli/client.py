"""HTTP client for Blockstack Core and the UTXO service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from blockstack_cli.errors import (
    NetworkRequestError,
    NetworkUnavailableError,
    UnconfirmedTransactionError,
)

logger = logging.getLogger(__name__)


@dataclass
class NetworkClient:
    api_url: str
    utxo_service_url: str = "https://blockchain.info"
    timeout: float = 10.0
    retries: int = 2

    def __post_init__(self) -> None:
        try:
            import requests
            from requests.adapters import HTTPAdapter
            from urllib3.util.retry import Retry
        except Exception as exc:  # pragma: no cover
            raise NetworkUnavailableError(f"requests stack unavailable: {exc}") from exc

        self._session = requests.Session()
        retry = Retry(
            total=max(0, int(self.retries)),
            connect=max(0, int(self.retries)),
            read=max(0, int(self.retries)),
            status=max(0, int(self.retries)),
            status_forcelist=(429, 500, 502, 503, 504),
            backoff_factor=0.2,
            allowed_methods=("GET", "POST"),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    @staticmethod
    def _join(base_url: str, path: str) -> str:
        return f"{base_url.rstrip('/')}/{path.lstrip('/')}"

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict] = None,
        json_payload: Optional[dict] = None,
    ):
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json_payload,
                timeout=self.timeout,
            )
        except Exception as exc:  # pragma: no cover
            raise NetworkUnavailableError(str(exc)) from exc

        if response.status_code >= 400:
            body: object | None = None
            detail: object | None = None
            try:
                body = response.json()
            except Exception:
                body = response.text
            if isinstance(body, dict):
                detail = body.get("error") or body.get("detail")
            if isinstance(detail, str):
                message = f"Bad response status: {response.status_code} {detail}"
            else:
                message = f"Bad response status: {response.status_code}"
            raise NetworkRequestError(
                message,
                status_code=response.status_code,
                detail=detail,
                body=body,
            )
        return response

    def _api(self, method: str, path: str, **kwargs: Any) -> Any:
        return self._send(method, self._join(self.api_url, path), **kwargs).json()

    def _utxo(self, path: str, **kwargs: Any) -> Any:
        return self._send("GET", self._join(self.utxo_service_url, path), **kwargs).json()

    # names and namespaces

    def get_name_info(self, name: str) -> dict:
        return self._api("GET", f"/v1/names/{name}")

    def get_name_price(self, name: str) -> dict:
        """Return ``{"units", "amount"}``, falling back to the v1 satoshi price."""
        try:
            payload = self._api("GET", f"/v2/prices/names/{name}")
        except NetworkRequestError as exc:
            if exc.status_code != 404:
                raise
            legacy = self._api("GET", f"/v1/prices/names/{name}").get("name_price") or {}
            if not legacy.get("satoshis"):
                raise NetworkRequestError(
                    f"Failed to get price for {name}. Does the namespace exist?",
                    status_code=404,
                ) from exc
            return {"units": "BTC", "amount": str(legacy["satoshis"])}
        price = payload.get("name_price", payload)
        return {"units": price["units"], "amount": str(price["amount"])}

    def get_namespace_price(self, namespace_id: str) -> dict:
        try:
            payload = self._api("GET", f"/v2/prices/namespaces/{namespace_id}")
        except NetworkRequestError as exc:
            if exc.status_code != 404:
                raise
            legacy = self._api("GET", f"/v1/prices/namespaces/{namespace_id}")
            if not legacy.get("satoshis"):
                raise NetworkRequestError(
                    f"Failed to get price for {namespace_id}",
                    status_code=404,
                ) from exc
            return {"units": "BTC", "amount": str(legacy["satoshis"])}
        return {"units": payload["units"], "amount": str(payload["amount"])}

    def get_names_owned(self, address: str) -> list:
        return self._api("GET", f"/v1/addresses/bitcoin/{address}").get("names", [])

    def get_blockchain_name_record(self, name: str) -> dict:
        return self._api("GET", f"/v1/blockchains/bitcoin/names/{name}")

    def get_name_history(self, name: str, page: int) -> dict:
        return self._api("GET", f"/v1/names/{name}/history", params={"page": page})

    def get_namespace_info(self, namespace_id: str) -> dict:
        return self._api("GET", f"/v1/namespaces/{namespace_id}")

    def get_zonefile(self, zonefile_hash: str) -> Optional[str]:
        try:
            response = self._send(
                "GET",
                self._join(self.api_url, f"/v1/zonefiles/{zonefile_hash}"),
            )
        except NetworkRequestError as exc:
            if exc.status_code == 404:
                return None
            raise
        return response.text

    def broadcast_zonefile(self, zonefile: str) -> dict:
        return self._api("POST", "/v1/zonefile/", json_payload={"zonefile": zonefile})

    # accounts

    def get_account_tokens(self, address: str) -> dict:
        return self._api("GET", f"/v1/accounts/{address}/tokens")

    def get_account_balance(self, address: str, token_type: str) -> str:
        try:
            payload = self._api("GET", f"/v1/accounts/{address}/{token_type}/balance")
        except NetworkRequestError as exc:
            # older Core nodes have no accounts API
            if exc.status_code == 404:
                return "0"
            raise
        return str(payload.get("balance") or "0")

    def get_account_history_page(
        self,
        address: str,
        start_block: int,
        end_block: int,
        page: int,
    ) -> list:
        return self._api(
            "GET",
            f"/v1/accounts/{address}/history",
            params={"startblock": start_block, "endblock": end_block, "page": page},
        )

    def get_account_at(self, address: str, block_height: int) -> list:
        return self._api("GET", f"/v1/accounts/{address}/history/{block_height}")

    # bitcoin

    def get_block_height(self) -> int:
        return int(self._utxo("/latestblock", params={"cors": "true"})["height"])

    def get_transaction_info(self, txid: str) -> dict:
        info = self._utxo(f"/rawtx/{txid}", params={"cors": "true"})
        if not info.get("block_height"):
            raise UnconfirmedTransactionError("Unconfirmed transaction")
        return info

    def get_utxos(self, address: str) -> list:
        try:
            payload = self._utxo(
                "/unspent",
                params={"format": "json", "active": address, "cors": "true"},
            )
        except NetworkRequestError as exc:
            if exc.status_code == 500 and "No free outputs" in str(exc.body or ""):
                return []
            raise
        return payload.get("unspent_outputs", [])


__all__ = ["NetworkClient"]
