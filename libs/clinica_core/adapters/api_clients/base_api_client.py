from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import urljoin

import backoff
import requests
import structlog
from pydantic import BaseModel
from requests.adapters import HTTPAdapter
from urllib3.exceptions import MaxRetryError, NewConnectionError
from urllib3.util.retry import Retry

T = TypeVar("T", bound=BaseModel)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


def _never_sent(exc: Exception) -> bool:
    """Falha antes de a conexão abrir: o corpo não chegou ao servidor."""
    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return True
    reason = exc.args[0] if exc.args else None
    return isinstance(reason, MaxRetryError) and isinstance(reason.reason, NewConnectionError)


class BaseAPIClient:
    """
    Utilitário HTTP simples com:
      • retry exponencial (urllib3) para métodos idempotentes em 5xx
      • nova tentativa (backoff) em falha de conexão; POST só quando a
        conexão nem chegou a ser aberta
      • timeout configurável
      • parse + validação Pydantic
    """

    def __init__(
        self,
        *,
        base_url: str,
        default_headers: dict[str, str] | None = None,
        timeout: float = 5.0,
        retries: int = 3,
    ) -> None:
        self.log = structlog.get_logger(__name__).bind(component=type(self).__name__)
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.retries = retries

        self.log.debug("Configurando cliente", base_url=self.base_url, timeout=timeout)

        # sessão + retry -----------------------------------------------------------------
        self.session = requests.Session()
        if default_headers:
            self.session.headers.update(default_headers)

        retry_cfg = Retry(
            total=retries,
            backoff_factor=0.3,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=frozenset({"GET", "DELETE"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_cfg)
        for scheme in ("https://", "http://"):
            self.session.mount(scheme, adapter)

    # ---------------------------------------------------------------------- utils -----
    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Executa a request com backoff exponencial em falhas de conexão.
        Métodos não idempotentes só repetem se a requisição não saiu
        (ex.: conexão abortada depois do envio não é repetida).
        """
        @backoff.on_exception(
            backoff.expo,
            requests.exceptions.ConnectionError,
            max_tries=max(self.retries, 1),
            jitter=None,
            factor=0.3,
            giveup=lambda exc: method.upper() not in IDEMPOTENT_METHODS and not _never_sent(exc),
        )
        def _do() -> requests.Response:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)

        return _do()

    # ---------------------------------------------------------------------- HTTP ------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        response_model: type[T] | None = None,
    ) -> T | dict[str, Any] | None:
        """
        Executa a chamada e devolve o objeto Pydantic validado (ou o JSON cru
        quando `response_model` é None; None para respostas sem corpo).
        Erros HTTP sobem como `requests.HTTPError`.
        """
        url = self._url(path)
        model_name = response_model.__name__ if response_model else None
        log = self.log.bind(method=method, url=url, model=model_name)
        log.debug("Enviando requisição", params=params)

        try:
            resp = self._send(method, url, params=params, json=json_body)
            log.debug("Resposta recebida", status_code=resp.status_code)
            resp.raise_for_status()

            if not resp.content:
                return None
            payload = resp.json()
            if response_model is None:
                return payload
            result = response_model.model_validate(payload)
            log.info("Resposta validada com sucesso", status_code=resp.status_code)
            return result

        except Exception as exc:  # noqa: BLE001
            log.error("Falha em _request()", error=str(exc))
            raise

    def _get(self, path: str, *, params: dict[str, Any] | None = None, response_model: type[T]) -> T:
        return self._request("GET", path, params=params, response_model=response_model)

    def _post(self, path: str, *, json_body: dict[str, Any], response_model: type[T]) -> T:
        return self._request("POST", path, json_body=json_body, response_model=response_model)

    def _delete(self, path: str) -> dict[str, Any] | None:
        return self._request("DELETE", path)
