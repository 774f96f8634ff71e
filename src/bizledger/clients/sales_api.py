"""HTTP client for the sales ingestion endpoint."""

from typing import Any, Optional

import httpx
import structlog

from bizledger.config.settings import Settings
from bizledger.domain.errors import ExternalError, NotFoundError, ValidationError
from bizledger.domain.sales_import import SaleLine, SalesGateway

logger = structlog.get_logger(__name__)

SALES_PATH = "/api/vendas"
DEFAULT_TIMEOUT = 30.0


class SalesAPIError(ExternalError):
    """The sales API failed to process a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


def build_sale_payload(line: SaleLine, client_id: int, channel: str) -> dict[str, Any]:
    """JSON body the ingestion endpoint expects for one sale line."""
    return {
        "data_venda": line.sale_date.isoformat(),
        "nome_cliente": line.client_name,
        "client_id": client_id,
        "items": [
            {
                "sku_produto": line.sku,
                "quantidade_vendida": float(line.quantity),
                "preco_unitario": float(line.unit_price),
                "nome_produto": line.sku,
            }
        ],
        "canal": channel,
        "pedido_uid": line.idempotency_key,
    }


class SalesAPIClient(SalesGateway):
    """Sync client that posts sale lines to the ingestion API.

    The endpoint treats ``pedido_uid`` as an idempotency key and answers
    409 when it was already stored.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL (defaults to settings.api_base_url)
            timeout: Request timeout in seconds (defaults to settings.api_timeout)
            settings: Settings to take defaults from
            transport: Optional httpx transport, used by tests

        Raises:
            ValidationError: If neither base_url nor settings is given
        """
        if not base_url and settings is None:
            raise ValidationError("SalesAPIClient needs a base_url or settings")
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        if timeout is None:
            timeout = settings.api_timeout if settings is not None else DEFAULT_TIMEOUT
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "SalesAPIClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def create_sale(self, payload: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Post one sale.

        Returns:
            Response body, or None when the sale was already stored

        Raises:
            ValidationError: If the API rejected the payload
            NotFoundError: If the API doesn't know a referenced record
            SalesAPIError: On server errors or transport failures
        """
        client = self._get_client()
        try:
            response = client.post(SALES_PATH, json=payload)
        except httpx.RequestError as e:
            raise SalesAPIError(f"Request to {self.base_url}{SALES_PATH} failed: {e}") from e

        if response.status_code == 409:
            return None
        if response.status_code >= 400:
            detail = _error_detail(response)
            message = f"API error {response.status_code}: {detail}"
            if response.status_code == 404:
                raise NotFoundError(message)
            if response.status_code < 500:
                raise ValidationError(message)
            raise SalesAPIError(message, status_code=response.status_code, details=detail)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"raw": response.text[:500]}

    def emit(self, line: SaleLine, client_id: int, channel: str) -> bool:
        body = self.create_sale(build_sale_payload(line, client_id, channel))
        if body is None:
            logger.debug("sale_already_stored", pedido_uid=line.idempotency_key)
            return False
        return True


def _error_detail(response: httpx.Response) -> Any:
    if not response.content:
        return "empty response"
    try:
        body = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(body, dict):
        return body.get("error") or body.get("message") or body
    return body
