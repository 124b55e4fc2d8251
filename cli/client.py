from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the heart-rate relay."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def submit_reading(self, code: str, bpm: float, zone: int) -> None:
        self._request("POST", "/hr", json={"code": code, "bpm": bpm, "zone": zone})

    def get_current(self, code: str) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/hr/current", params={"code": code}).get("data")

    def get_history(self, code: str, seconds: Optional[int] = None) -> Dict[str, Any]:
        params = self._window_params(code, seconds)
        return self._request("GET", "/hr/history", params=params).get("data") or {}

    def get_stats(self, code: str, seconds: Optional[int] = None) -> Optional[Dict[str, Any]]:
        params = self._window_params(code, seconds)
        return self._request("GET", "/hr/stats", params=params).get("data")

    def get_status(self, code: str) -> Dict[str, Any]:
        return self._request("GET", "/hr/status", params={"code": code}).get("data") or {}

    @staticmethod
    def _window_params(code: str, seconds: Optional[int]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"code": code}
        if seconds is not None:
            params["seconds"] = seconds
        return params

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("error")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
