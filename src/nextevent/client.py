"""NextEvent SDK client

Entry point for applications talking to the NextEvent API. The Client
authenticates against the IAM service, sends requests through the RestClient
and wraps the responses into models.

Usage:
    client = Client.from_env()
    for event in client.get_events():
        print(event.title)
"""

import time
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from nextevent.core.config import Config, Env
from nextevent.models.access import Device, Gate, ScanLog
from nextevent.models.catalog import (
    BaseCategory,
    BasePrice,
    Category,
    DiscountCode,
    DiscountGroup,
    Price,
)
from nextevent.models.collection import AccessCodeCollection, Collection
from nextevent.models.event import Event
from nextevent.models.order import Basket, Order, TicketDocument
from nextevent.models.payment import CancellationRequest, Payment
from nextevent.models.token import Token
from nextevent.rest.client import RestClient
from nextevent.rest.responses import HALResponse
from nextevent.services.iam import Credentials, IAMClient
from nextevent.services.payment import PaymentClient
from nextevent.shared.exceptions import (
    AccessCodesNotFoundError,
    APIResponseError,
    BasketEmptyError,
    DeviceLogoutError,
    DeviceNotFoundError,
    InvalidArgumentError,
    InvalidStoreError,
    MissingDocumentError,
    NotAuthenticatedError,
    NotAuthorizedError,
    OrderItemNotFoundError,
    OrderNotFoundError,
    ScanLogsNotFoundError,
)
from nextevent.shared.logging import wrap_logger
from nextevent.store.base import Store
from nextevent.store.file import FileStore
from nextevent.util.query import Query, with_query
from nextevent.util.widget import Widget
from nextevent.validation.customer import Customer

T = TypeVar("T")

PAYMENT_TOKEN_KEY = "payment-token-key"
DEFAULT_TIMEOUT = 5
CHECKOUT_TIMEOUT = 20
TICKET_POLL_INTERVAL = 0.3
TICKET_POLL_MARGIN = 0.35

QueryLike = Query | dict[str, Any] | None


class Client:
    """Client for the NextEvent application API

    Args:
        app_id: Application id
        app_url: Application URL, e.g. https://myapp.nextevent.com
        auth_username: IAM user name
        auth_password: IAM password
        env: Environment (PROD, INT, TEST or DEV)
        cache: Store for the IAM and payment tokens, a FileStore by default
        logger: loguru logger, the module logger by default
        http_client: Preconfigured httpx client for the application API
    """

    def __init__(
        self,
        app_id: str,
        app_url: str,
        auth_username: str,
        auth_password: str,
        env: str | None = None,
        cache: Store | None = None,
        logger: Any = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        options = {
            "app_id": app_id,
            "app_url": app_url,
            "auth_username": auth_username,
            "auth_password": auth_password,
        }
        for key, value in options.items():
            if not value:
                raise InvalidArgumentError(f"Require {key} to create a Client")

        self.app_id = app_id
        self.app_url = app_url.rstrip("/")
        self._cache = cache if isinstance(cache, Store) else FileStore()
        self._logger = wrap_logger(logger, app_id=app_id)

        if env:
            Env.set_env(env)

        credentials = Credentials(
            name=auth_username,
            password=auth_password,
            scope=f"identity_info {app_id}",
        )
        self._iam_client = IAMClient(credentials, self._cache, logger)
        self._payment_client = PaymentClient(logger)

        if http_client is None:
            http_client = RestClient.build_http_client(
                self.app_url,
                timeout=DEFAULT_TIMEOUT,
                headers=Env.default_headers(),
            )
        self._rest_client = RestClient(http_client, logger)
        self._rest_client.set_unauthorized_handler(self._renew_authentication)

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "Client":
        """Create a client from a Config

        The config's locale is registered for all environments and its
        cache path selects the FileStore location unless a cache is given.
        """
        if config.locale:
            Env.set_var("locale", config.locale)
        if "cache" not in kwargs and config.cache_path:
            kwargs["cache"] = FileStore(config.cache_path)
        return cls(
            app_id=config.app_id,
            app_url=config.app_url,
            auth_username=config.auth_username,
            auth_password=config.auth_password,
            env=config.env,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_file: str | None = None, **kwargs: Any) -> "Client":
        """Create a client from NEXTEVENT_* environment variables"""
        return cls.from_config(Config.from_env(env_file), **kwargs)

    @property
    def cache(self) -> Store:
        return self._cache

    @cache.setter
    def cache(self, cache: Store) -> None:
        if not isinstance(cache, Store):
            raise InvalidStoreError()
        self._cache = cache
        self._iam_client.cache = cache

    def set_logger(self, logger: Any = None) -> None:
        self._logger = wrap_logger(logger, app_id=self.app_id)
        self._rest_client.set_logger(logger)
        self._iam_client.set_logger(logger)
        self._payment_client.set_logger(logger)

    @property
    def rest_client(self) -> RestClient:
        return self._rest_client

    @property
    def iam_client(self) -> IAMClient:
        return self._iam_client

    @property
    def payment_client(self) -> PaymentClient:
        return self._payment_client

    # Authentication

    def authenticate(self) -> bool:
        """Set a valid IAM token as authorization of the rest client

        Raises:
            NotAuthenticatedError: If no valid token could be obtained
        """
        self._logger.debug("Authenticate SDK client")
        try:
            token = self._iam_client.get_token()
        except APIResponseError as e:
            self._logger.bind(**e.to_log_context()).error(
                "Authentication failed"
            )
            raise NotAuthenticatedError(
                f"Could not authorize, request failed: {e}"
            ) from e

        if token is None or token.is_expired():
            self._logger.warning("Authentication token is expired")
            raise NotAuthenticatedError("Authentication token is expired")

        self._rest_client.set_authorization_header(token.authorization_header)
        return True

    def get_api_token(self) -> Token:
        self.authenticate()
        return self._iam_client.get_token()

    def _renew_authentication(self) -> None:
        """Replace the IAM token the API rejected

        Registered on the rest client, which retries the rejected request once.
        Model collections fetching further pages go through the same path.

        Raises:
            NotAuthenticatedError: If no new token could be obtained
        """
        self._logger.warning("Request unauthorized, renewing IAM token")
        try:
            self._iam_client.get_new_token()
        except APIResponseError as e:
            raise NotAuthenticatedError(
                f"Could not renew IAM token: {e}"
            ) from e
        self.authenticate()

    def _request(self, send: Callable[[], T]) -> T:
        self.authenticate()
        return send()

    def _get(self, url: str) -> HALResponse:
        return self._request(lambda: self._rest_client.get(url))

    def _post(
        self, url: str, payload: dict | list | None = None, **kwargs: Any
    ) -> HALResponse:
        return self._request(
            lambda: self._rest_client.post(url, payload, **kwargs)
        )

    def _put(self, url: str, payload: dict) -> HALResponse:
        return self._request(lambda: self._rest_client.put(url, payload))

    def _delete(self, url: str) -> bool:
        return self._request(lambda: self._rest_client.delete(url))

    # Events

    def get_events(self) -> list[Event]:
        try:
            response = self._get("/jsonld/event")
        except APIResponseError as e:
            self._logger.bind(**e.to_log_context()).error(
                "Failed fetching events"
            )
            raise
        events = (response.embedded or {}).get("itemListElement", [])
        self._logger.bind(count=len(events)).debug("Fetched events")
        return [Event(source) for source in events]

    def get_event(self, event_id: int | str) -> Event:
        try:
            response = self._get(f"/jsonld/event/{event_id}")
        except APIResponseError as e:
            self._logger.bind(**e.to_log_context()).error(
                f"Failed fetching event {event_id}"
            )
            raise
        self._logger.bind(event_id=event_id).debug(f"Fetched event {event_id}")
        return Event(response.embedded)

    # Basket and checkout

    def get_basket(self, order_id: int) -> Basket:
        """Fetch a basket which still contains items

        Raises:
            BasketEmptyError: If the basket does not exist or is empty
        """
        try:
            response = self._get(f"/basket/{order_id}")
        except APIResponseError as e:
            if e.status_code == 404:
                raise BasketEmptyError("Basket does not exist") from e
            self._logger.bind(**e.to_log_context()).error(
                "Basket could not be fetched"
            )
            raise
        self._logger.bind(order_id=order_id).debug("Fetched basket")

        data = response.embedded
        if not isinstance(data, dict) or data.get("order_id") is None:
            self._logger.bind(order_id=order_id).info("Basket does not exist")
            raise BasketEmptyError("Basket does not exist")
        basket = Basket(data)
        if not basket.has_basket_items():
            self._logger.bind(order_id=order_id).info("Basket is empty")
            raise BasketEmptyError("Basket is empty")
        return basket

    def delete_basket(self, order_id: int) -> bool:
        self._logger.bind(order_id=order_id).info("Delete basket")
        try:
            return self._delete(f"/basket/{order_id}/item")
        except APIResponseError as e:
            if e.status_code == 404:
                self._logger.bind(**e.to_log_context()).error(
                    "Failed deleting basket"
                )
                raise OrderNotFoundError.from_error(
                    e, "Order/Basket not found for delete"
                ) from e
            raise

    def delete_basket_item(self, order_id: int, order_item_id: int) -> bool:
        self._logger.bind(order_id=order_id, order_item_id=order_item_id).info(
            "Delete basket item"
        )
        try:
            return self._delete(f"/basket/{order_id}/item/{order_item_id}")
        except APIResponseError as e:
            if e.status_code == 404:
                raise OrderItemNotFoundError.from_error(
                    e, "Order/Basket item not found for delete"
                ) from e
            raise

    def authorize_order(self, order_id: int) -> Payment:
        """Check out the order and return the payment to settle

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        self._logger.bind(order_id=order_id).debug("Authorize order")
        try:
            response = self._post(
                f"/checkout/{order_id}", timeout=CHECKOUT_TIMEOUT
            )
        except APIResponseError as e:
            if e.status_code == 404:
                self._logger.bind(order_id=order_id, **e.to_log_context()).error(
                    "Failed to authorize order"
                )
                raise OrderNotFoundError.from_error(e) from e
            raise
        self._logger.bind(order_id=order_id).info("Order authorized")
        return Payment(response.content)

    # Payment

    def get_payment_token(self) -> Token:
        """Return the payment token, cached until it expires

        Raises:
            NotAuthorizedError: If the application may not settle payments
        """
        token = Token.from_string(self._cache.get(PAYMENT_TOKEN_KEY))
        if token and not token.is_expired():
            self._logger.debug("Use payment token from cache")
            return token

        try:
            response = self._post("/payment/token")
        except APIResponseError as e:
            self._logger.bind(**e.to_log_context()).error(
                "Failed fetching payment token"
            )
            if e.status_code == 401:
                raise NotAuthorizedError.from_error(e) from e
            raise
        self._logger.bind(**response.to_log_context()).info(
            "Fetched payment token from API"
        )
        token = Token.from_response(response.content)
        self._cache.set(PAYMENT_TOKEN_KEY, token.to_string())
        return token

    def settle_payment(
        self,
        payment: Payment,
        customer: Customer | dict[str, Any],
        transaction_id: str | None = None,
    ) -> dict[str, Any]:
        """Settle the payment of an authorized order

        Customer example:
            {
                "email": "thomas.muster@example.com",
                "name": "Thomas Muster",
                "company": "Musterfirma",
                "address": {
                    "street": "Musterstr. 1",
                    "pobox": "",
                    "zip": "3001",
                    "city": "Bern",
                    "country": "CH",
                },
            }
        """
        return self._payment_client.settle_payment(
            self.get_payment_token(), payment, customer, transaction_id
        )

    def abort_payment(self, payment: Payment, reason: str) -> bool:
        return self._payment_client.abort_payment(
            self.get_payment_token(), payment, reason
        )

    # Orders and tickets

    def get_order(self, order_id: int, embed: str = "tickets,document") -> Order:
        url = f"/order/{order_id}"
        if embed:
            url += f"?_embed={embed}"
        try:
            response = self._get(url)
        except APIResponseError as e:
            if e.status_code == 404:
                self._logger.bind(order_id=order_id, **e.to_log_context()).error(
                    "Order not found"
                )
                raise OrderNotFoundError.from_error(e, "Order not found") from e
            raise
        self._logger.bind(order_id=order_id).debug("Order fetched")
        return Order(response.embedded, self._rest_client)

    def get_ticket_documents(
        self, order_id: int, wait_for: float = 0
    ) -> list[TicketDocument]:
        """Return the ticket documents of a completed order

        Args:
            order_id: Order id
            wait_for: Seconds to wait for the tickets to be issued

        Raises:
            MissingDocumentError: If the tickets are not issued in time
        """
        deadline = time.monotonic() + wait_for - TICKET_POLL_MARGIN
        order = self.get_order(order_id)
        while time.monotonic() < deadline and not order.all_tickets_issued():
            time.sleep(TICKET_POLL_INTERVAL)
            order = self.get_order(order_id)

        if not order.all_tickets_issued():
            self._logger.bind(order_id=order_id).info(
                "Ticket documents not issued yet"
            )
            raise MissingDocumentError(
                f"Ticket documents not yet issued for order {order_id}"
            )

        documents: dict[str, TicketDocument] = {}
        for ticket in order.tickets:
            document = ticket.document
            documents.setdefault(document.download_url, document)
        return list(documents.values())

    # Cancellation

    def request_cancellation(self, order_id: int) -> CancellationRequest:
        try:
            response = self._post(f"/cancellation/{order_id}")
        except APIResponseError as e:
            if e.status_code == 404:
                raise OrderNotFoundError.from_error(
                    e, "Order not found for cancellation"
                ) from e
            raise
        self._logger.bind(order_id=order_id).info("Cancellation requested")
        return CancellationRequest(response.content)

    def settle_cancellation(
        self, cancellation_request: CancellationRequest, reason: str = ""
    ) -> bool:
        order_id = cancellation_request.order_id
        response = self._post(
            f"/cancellation/{order_id}/settle",
            cancellation_request.settlement_data(reason),
        )
        self._logger.bind(order_id=order_id).info("Cancellation settled")
        return 200 <= response.status_code < 300

    # Catalog

    def _collection(
        self,
        path: str,
        model_class: type,
        query: QueryLike = None,
        instance_args: list[Any] | None = None,
    ) -> Collection:
        response = self._get(with_query(path, query))
        return Collection(
            model_class,
            instance_args,
            response.content,
            self._rest_client,
        )

    def get_categories(self, query: QueryLike = None) -> Collection:
        return self._collection("/category", Category, query)

    def get_prices(self, query: QueryLike = None) -> Collection:
        return self._collection("/price", Price, query)

    def get_base_categories(self, query: QueryLike = None) -> Collection:
        return self._collection(
            "/base_category", BaseCategory, query, [self._rest_client]
        )

    def get_base_prices(self, query: QueryLike = None) -> Collection:
        return self._collection("/base_price", BasePrice, query)

    def get_discount_groups(self, query: QueryLike = None) -> Collection:
        return self._collection("/discount_group", DiscountGroup, query)

    def create_base_category(self, base_category: BaseCategory) -> BaseCategory:
        """Create a spawned base category together with its new base prices"""
        if not base_category.is_new():
            raise InvalidArgumentError("The base category already exists")
        response = self._post("/base_category", base_category.to_dict(True))
        base_category.set_source(response.content)
        base_category.set_rest_client(self._rest_client)
        self._logger.bind(base_category_id=base_category.id).info(
            "Base category created"
        )

        for base_price in base_category.base_prices or []:
            if base_price.is_new():
                base_price.set("base_category_id", base_category.id)
                self.create_base_price(base_price)
        return base_category

    def update_base_category(self, base_category: BaseCategory) -> BaseCategory:
        if base_category.is_new():
            raise InvalidArgumentError("Create the base category first")
        response = self._put(
            f"/base_category/{base_category.id}", base_category.to_dict(True)
        )
        base_category.set_source(response.content)
        return base_category

    def delete_base_category(self, base_category: BaseCategory) -> bool:
        if base_category.is_new():
            raise InvalidArgumentError("The base category does not exist")
        return self._delete(f"/base_category/{base_category.id}")

    def create_base_price(self, base_price: BasePrice) -> BasePrice:
        if not base_price.is_new():
            raise InvalidArgumentError("The base price already exists")
        response = self._post("/base_price", base_price.to_dict(True))
        base_price.set_source(response.content)
        self._logger.bind(base_price_id=base_price.id).info("Base price created")
        return base_price

    def update_base_price(self, base_price: BasePrice) -> BasePrice:
        if base_price.is_new():
            raise InvalidArgumentError("Create the base price first")
        response = self._put(
            f"/base_price/{base_price.id}", base_price.to_dict(True)
        )
        base_price.set_source(response.content)
        return base_price

    def delete_base_price(self, base_price: BasePrice) -> bool:
        if base_price.is_new():
            raise InvalidArgumentError("The base price does not exist")
        return self._delete(f"/base_price/{base_price.id}")

    def create_discount_codes(
        self, codes: list[DiscountCode]
    ) -> list[DiscountCode]:
        """Create spawned discount codes in one request"""
        if any(not code.is_new() for code in codes):
            raise InvalidArgumentError("Only new discount codes can be created")
        response = self._post(
            "/discount_code", [code.to_dict() for code in codes]
        )
        created = Collection(DiscountCode, data=response.content)
        self._logger.bind(count=len(created)).info("Discount codes created")
        return list(created)

    # Entrance check

    def get_access_codes(self, query: QueryLike = None) -> AccessCodeCollection:
        try:
            response = self._get(with_query("/access_code", query))
        except APIResponseError as e:
            if e.status_code == 404:
                raise AccessCodesNotFoundError.from_error(e) from e
            raise
        return AccessCodeCollection(response.content, self._rest_client)

    def get_gate(self, gate_id: int) -> Gate:
        response = self._get(f"/gate/{gate_id}")
        return Gate(response.embedded, self._rest_client)

    def get_gates(self, query: QueryLike = None) -> Collection:
        return self._collection("/gate", Gate, query, [self._rest_client])

    def get_devices(self, query: QueryLike = None) -> Collection:
        try:
            return self._collection("/device", Device, query)
        except APIResponseError as e:
            if e.status_code == 404:
                raise DeviceNotFoundError.from_error(e) from e
            raise

    def login_device(
        self,
        gate_hash: str,
        device_uuid: str,
        name: str | None = None,
        platform: str | None = None,
        version: str | None = None,
    ) -> Device:
        """Log a scanning device in at the gate identified by its hash

        Returns:
            The device with its gate attached
        """
        payload = {
            "hash": gate_hash,
            "uuid": device_uuid,
            "name": name,
            "platform": platform,
            "version": version,
        }
        payload = {k: v for k, v in payload.items() if v is not None}
        response = self._post("/device/login", payload)
        data = response.embedded or {}
        gate = Gate(data.get("gate"), self._rest_client)
        device = Device(data.get("device"), gate)
        self._logger.bind(device_id=device.id, gate_id=device.gate.id).info(
            "Device logged in"
        )
        return device

    def logout_device(self, device: Device) -> bool:
        """Log the device out of its gate

        Raises:
            DeviceLogoutError: If the API refuses the logout
        """
        try:
            self._post(f"/device/logout/{device.id}")
        except APIResponseError as e:
            self._logger.bind(device_id=device.id, **e.to_log_context()).error(
                "Device logout failed"
            )
            raise DeviceLogoutError(f"Could not log out device {device.id}") from e
        device.gate = None
        self._logger.bind(device_id=device.id).info("Device logged out")
        return True

    def get_scan_logs(self, query: QueryLike = None) -> Collection:
        try:
            return self._collection("/scan_log", ScanLog, query)
        except APIResponseError as e:
            if e.status_code == 404:
                raise ScanLogsNotFoundError.from_error(e) from e
            raise

    # Widget

    def get_widget(self, widget_hash: str) -> Widget:
        if not widget_hash:
            raise InvalidArgumentError("Require the hash of the widget")
        return Widget(self.app_url, widget_hash)
