from __future__ import annotations

import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ConduitError(RuntimeError):
    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class MethodNotSupportedError(ConduitError):
    pass


class ConduitClient:
    def __init__(self, base_url: str, token: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        payload = dict(params or {})
        if self.token:
            payload["__conduit__"] = {"token": self.token}
        form = {
            "params": json.dumps(payload),
            "output": "json",
            "__conduit__": "1",
        }
        logger.debug("conduit call %s", method)
        response = self._request_raw(method, form)
        self._raise_for_status(method, response)
        try:
            body = response.json()
        except ValueError as exc:
            raise ConduitError(f"Conduit {method} returned a non-JSON response") from exc

        error_code = body.get("error_code")
        if error_code:
            info = str(body.get("error_info") or "")
            if error_code == "ERR-CONDUIT-CALL" and "does not exist" in info:
                raise MethodNotSupportedError(f"Conduit method {method} is not supported: {info}", code=error_code)
            raise ConduitError(f"Conduit {method} failed: {error_code}: {info}", code=error_code)
        return body.get("result")

    def whoami(self) -> dict[str, Any]:
        return dict(self.call("user.whoami"))

    def query_users(self, phids: list[str]) -> list[dict[str, Any]]:
        return list(self.call("user.query", {"phids": phids}) or [])

    def query_revisions(self, **constraints: Any) -> list[dict[str, Any]]:
        data = self.call("differential.query", constraints)
        if isinstance(data, dict):
            return list(data.values())
        return list(data or [])

    def get_commit_message(self, revision_id: int) -> str:
        return str(self.call("differential.getcommitmessage", {"revision_id": revision_id}) or "")

    def close_revision(self, revision_id: int) -> None:
        self.call("differential.close", {"revisionID": revision_id})

    def query_buildables(self, buildable_phids: list[str]) -> list[dict[str, Any]]:
        data = self.call(
            "harbormaster.querybuildables",
            {"buildablePHIDs": buildable_phids, "manualBuildables": False},
        )
        return list((data or {}).get("data") or [])

    def query_builds(self, buildable_phids: list[str]) -> list[dict[str, Any]]:
        data = self.call("harbormaster.querybuilds", {"buildablePHIDs": buildable_phids})
        return list((data or {}).get("data") or [])

    def query_repositories(self, callsigns: list[str]) -> list[dict[str, Any]]:
        return list(self.call("repository.query", {"callsigns": callsigns}) or [])

    def look_soon(self, callsigns: list[str]) -> None:
        self.call("diffusion.looksoon", {"callsigns": callsigns})

    def _request_raw(self, method: str, form: dict[str, str]) -> httpx.Response:
        url = f"{self.base_url}/api/{method}"
        try:
            with httpx.Client(timeout=self.timeout, headers={"Accept": "application/json"}) as client:
                return client.post(url, data=form)
        except httpx.HTTPError as exc:
            raise ConduitError(f"Conduit {method} request failed: {exc}") from exc

    def _raise_for_status(self, method: str, response: httpx.Response) -> None:
        if response.is_success:
            return
        body = response.text.strip()
        if len(body) > 200:
            body = f"{body[:200]}..."
        if response.status_code == 404:
            raise MethodNotSupportedError(f"Conduit {method} not found (HTTP 404)", code="HTTP-404")
        raise ConduitError(f"Conduit API {response.status_code}: {body}", code=f"HTTP-{response.status_code}")
