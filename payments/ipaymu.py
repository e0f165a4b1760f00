"""
Client for the iPaymu payment gateway.

Every call is a signed JSON POST to ``<base>/api/transaksi/merchant``;
the ``action`` field of the body selects the operation (``payment``,
``status`` or ``refund``).  The request signature is a lowercase hex
HMAC-SHA256 keyed by the API key over ``<merchant code><METHOD><api key>``,
and the gateway signs its notify callbacks the same way.
"""
import hashlib
import hmac
import logging
from dataclasses import dataclass

import requests
from django.conf import settings

from common.errors import GatewayError

logger = logging.getLogger(__name__)

TRANSACTION_PATH = "/api/transaksi/merchant"

STATUS_SUCCESS = "berhasil"
STATUS_FAILURE = "gagal"


@dataclass(frozen=True)
class IpaymuTransaction:
    transaction_id: str
    payment_url: str


class IpaymuClient:
    def __init__(self, base_url: str, api_key: str, merchant_code: str, timeout: int = 15):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.merchant_code = merchant_code
        self.timeout = timeout

    def generate_signature(self, method: str = "POST") -> str:
        message = f"{self.merchant_code}{method.upper()}{self.api_key}"
        return hmac.new(
            self.api_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
        ).hexdigest().lower()

    def verify_callback_signature(self, sign: str | None) -> bool:
        """Return True when ``sign`` matches the gateway's notify signature."""
        if not sign:
            return False
        return hmac.compare_digest(str(sign).lower(), self.generate_signature("POST"))

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "signature": self.generate_signature("POST"),
            "va": self.merchant_code,
            "Content-Request": "JSON",
        }

    def _post(self, body: dict) -> dict:
        url = f"{self.base_url}{TRANSACTION_PATH}"
        try:
            resp = requests.post(url, json=body, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.exception("iPaymu %s request failed", body.get("action"))
            raise GatewayError(f"iPaymu request failed: {e}")

        if not resp.ok:
            logger.error("iPaymu %s rejected: %s %s", body.get("action"), resp.status_code, resp.text[:500])
            raise GatewayError(f"iPaymu API error: {resp.status_code} - {resp.text[:200]}")

        try:
            return resp.json()
        except ValueError:
            raise GatewayError("iPaymu returned a non-JSON response")

    def create_transaction(
        self,
        *,
        product: list[str],
        qty: list[int],
        price: list[int],
        amount: int,
        name: str,
        email: str,
        phone: str = "",
        return_url: str = "",
        notify_url: str = "",
        note: str = "",
        description: str = "",
    ) -> IpaymuTransaction:
        """Open a payment at the gateway and return its id and hosted payment URL."""
        body = {
            "product": product,
            "qty": qty,
            "price": price,
            "amount": amount,
            "name": name,
            "email": email,
            "phone": phone,
            "returnUrl": return_url,
            "notifyUrl": notify_url,
            "note": note,
            "description": description,
            "action": "payment",
            "merchantid": self.merchant_code,
        }
        data = self._post(body)
        transaction_id = data.get("KodeTransaksi")
        payment_url = data.get("PaymentUrl")
        if not transaction_id or not payment_url:
            logger.error("iPaymu payment response missing fields: %s", data)
            raise GatewayError(f"iPaymu did not return a transaction: {data.get('Message', 'unknown error')}")

        logger.info("iPaymu transaction %s created for %s", transaction_id, amount)
        return IpaymuTransaction(transaction_id=str(transaction_id), payment_url=payment_url)

    def get_transaction_status(self, transaction_id: str) -> dict:
        return self._post({"action": "status", "id": transaction_id})

    def refund_transaction(self, transaction_id: str, amount: int | None = None) -> dict:
        body = {"action": "refund", "id": transaction_id}
        if amount:
            body["amount"] = amount
        data = self._post(body)
        logger.info("iPaymu refund requested for %s", transaction_id)
        return data


def get_client() -> IpaymuClient:
    """Build a client from Django settings."""
    return IpaymuClient(
        base_url=settings.IPAYMU_BASE_URL,
        api_key=settings.IPAYMU_API_KEY,
        merchant_code=settings.IPAYMU_MERCHANT_CODE,
        timeout=getattr(settings, "IPAYMU_TIMEOUT", 15),
    )
