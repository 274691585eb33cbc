"""Paginated HAL collections

A Collection holds the models of the pages loaded so far and fetches the
following pages through its rest client while it is indexed or iterated.
len() always reports the total item count announced by the API.
"""

from collections.abc import Callable, Iterator
from datetime import datetime
from typing import TYPE_CHECKING, Any

from nextevent.shared.exceptions import AccessCodeValidateError, CollectionError

from .access import AccessCode, Device, EntryState, GateMode

if TYPE_CHECKING:
    from nextevent.rest import RestClient


class Collection:
    """Lazily paginated list of models

    Args:
        model_class: Class instantiated for every embedded item
        instance_args: Extra constructor arguments; callables are called
            with the raw item and their result is passed instead
        data: HAL data of the first page
        rest_client: Client used to fetch subsequent pages
    """

    def __init__(
        self,
        model_class: type,
        instance_args: list[Any] | None = None,
        data: dict[str, Any] | None = None,
        rest_client: "RestClient | None" = None,
    ) -> None:
        self._model_class = model_class
        self._instance_args = list(instance_args or [])
        self.rest_client = rest_client
        self._models: list[Any] = []
        self._total_items = 0
        self._page_count = 0
        self._page = 1
        self._page_size = 0
        self._current_page: str | None = None
        self._next_page: str | None = None
        self._previous_page: str | None = None
        self._last_page: str | None = None
        self._embedded_key: str | None = None
        if data is not None:
            self.set_data(data)

    def set_data(self, data: dict[str, Any], reset: bool = True) -> None:
        """Load a HAL page

        Args:
            data: Page content with `_embedded` and optional `_links`
            reset: Drop the models loaded so far

        Raises:
            CollectionError: If the data has no `_embedded` entry
        """
        if not isinstance(data, dict) or data.get("_embedded") is None:
            raise CollectionError(
                "This seems to be not valid collection data. "
                "Please provide the _embedded data"
            )
        if reset:
            self._models = []

        embedded = data["_embedded"]
        if isinstance(embedded, dict):
            key = next(iter(embedded), None)
            items = embedded[key] if key is not None else []
        else:
            key, items = None, embedded
        self._embedded_key = key
        for item in items or []:
            self._models.append(self._instantiate(item))

        links = data.get("_links") or {}
        self._current_page = _href(links.get("self"))
        self._next_page = _href(links.get("next"))
        self._previous_page = _href(links.get("prev"))
        self._last_page = _href(links.get("last"))
        self._total_items = int(data.get("total_items", len(self._models)))
        self._page_count = int(data.get("page_count", 1))
        self._page = int(data.get("page", 1))
        self._page_size = int(data.get("page_size", self._total_items))

    def _instantiate(self, item: dict[str, Any]) -> Any:
        args = [arg(item) if callable(arg) else arg for arg in self._instance_args]
        return self._model_class(item, *args)

    def fetch_next_page(self) -> bool:
        """Load the next page and append its models

        Returns:
            False if there is no next page

        Raises:
            CollectionError: If no rest client is set
        """
        if not self._next_page:
            return False
        if self.rest_client is None:
            raise CollectionError(
                "Can not fetch the next page without a rest client"
            )
        response = self.rest_client.get(self._next_page)
        self.set_data(response.content, reset=False)
        return True

    def _load_until(self, index: int) -> None:
        if index < self._total_items:
            while index >= len(self._models) and self.fetch_next_page():
                pass

    def __len__(self) -> int:
        return self._total_items

    def __getitem__(self, index: int) -> Any:
        if index < 0:
            index += self._total_items
        if index < 0 or index >= self._total_items:
            raise IndexError("Collection index out of range")
        self._load_until(index)
        if index < len(self._models):
            return self._models[index]
        return None

    def __setitem__(self, index: int, value: Any) -> None:
        self._check_model(value)
        if index == len(self._models):
            self._models.append(value)
        else:
            self._models[index] = value
        self._total_items = max(self._total_items, len(self._models))

    def __delitem__(self, index: int) -> None:
        del self._models[index]
        self._total_items = max(self._total_items - 1, len(self._models))

    def __iter__(self) -> Iterator[Any]:
        position = 0
        while True:
            self._load_until(position)
            if position >= len(self._models):
                return
            yield self._models[position]
            position += 1

    def append(self, value: Any) -> None:
        self[len(self._models)] = value

    def _check_model(self, value: Any) -> None:
        if type(value) is not self._model_class:
            raise CollectionError(
                f"Only instances of {self._model_class.__name__} allowed"
            )

    def filter(self, callback: Callable[[Any], bool]) -> "Collection":
        """Return a single-page collection of the items matching callback"""
        if not callable(callback):
            raise CollectionError("The callback argument has to be callable")
        filtered = [item for item in self if callback(item)]
        key = self._embedded_key if self._embedded_key is not None else "items"
        data = {
            "_embedded": {key: [item.to_dict() for item in filtered]},
            "_links": {
                "self": self._current_page,
                "next": None,
                "prev": None,
                "last": self._current_page,
            },
            "total_items": len(filtered),
            "page_count": 1,
            "page": 1,
            "page_size": len(filtered),
        }
        return Collection(
            self._model_class, self._instance_args, data, self.rest_client
        )

    def map(self, callback: Callable[[Any], Any]) -> list[Any]:
        if not callable(callback):
            raise CollectionError("The callback argument has to be callable")
        return [callback(item) for item in self]

    @property
    def current_page(self) -> str | None:
        return self._current_page

    @property
    def next_page(self) -> str | None:
        return self._next_page

    @property
    def previous_page(self) -> str | None:
        return self._previous_page

    @property
    def last_page(self) -> str | None:
        return self._last_page

    @property
    def pages(self) -> int:
        return self._page_count

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def model_class(self) -> type:
        return self._model_class

    def __repr__(self) -> str:
        return (
            f"Collection({self._model_class.__name__}, "
            f"loaded={len(self._models)}, total={self._total_items})"
        )


def _href(link: Any) -> str | None:
    """HAL links are either plain strings or {"href": ...} objects"""
    if isinstance(link, dict):
        return link.get("href")
    return link


class AccessCodeCollection(Collection):
    """Access codes which can be validated at a gate"""

    def __init__(
        self,
        data: dict[str, Any] | None = None,
        rest_client: "RestClient | None" = None,
    ) -> None:
        super().__init__(AccessCode, data=data, rest_client=rest_client)

    def set_entry_state(
        self,
        device: Device,
        entry_state: EntryState | None = None,
        connection: str = "online",
        categories: list[int] | None = None,
        processed: datetime | str | None = None,
    ) -> "AccessCodeCollection":
        """Mark the codes as entered or left through the device's gate

        Args:
            device: Logged in device scanning the codes
            entry_state: EntryState.IN or EntryState.OUT, defaults to the
                gate mode
            connection: "online" or "offline"
            categories: Categories to validate against, defaults to the
                category of each code
            processed: Scan time, defaults to now

        Raises:
            AccessCodeValidateError: If the device is not logged in, there is
                no rest client or the entry state can't be determined
        """
        gate = device.gate
        if gate is None:
            raise AccessCodeValidateError("The device is not logged in!")
        if self.rest_client is None:
            raise AccessCodeValidateError("Call set_rest_client first!")

        if entry_state is None:
            if gate.mode is GateMode.BOTH:
                raise AccessCodeValidateError(
                    'The gate is in mode "both"! '
                    "You have to provide the entry state on your own!"
                )
            entry_state = (
                EntryState.OUT if gate.mode is GateMode.OUT else EntryState.IN
            )
        if entry_state not in (EntryState.IN, EntryState.OUT):
            raise AccessCodeValidateError(
                "An entry state has to be set. "
                "Either EntryState.IN or EntryState.OUT!"
            )

        if processed is None:
            processed = datetime.now().astimezone()
        if isinstance(processed, datetime):
            processed = processed.isoformat(timespec="seconds")

        codes: dict[str, dict[str, Any]] = {}
        for code in self:
            code_data = codes.get(code.code)
            if code_data is not None:
                known = code_data["categories"]
                if categories is None and code.category_id not in known:
                    known.append(code.category_id)
                continue
            code_data = {
                "code": code.code,
                "connection": connection,
                "processed": processed,
                "entry_state": "out" if entry_state is EntryState.OUT else "in",
            }
            if categories is None:
                code_data["categories"] = [code.category_id]
            else:
                code_data["categories"] = list(categories)
            codes[code.code] = code_data

        payload = {"device": device.uuid, "codes": list(codes.values())}
        response = self.rest_client.post(f"/access/invalidate/{gate.id}", payload)

        updated = {
            code.id: code
            for code in AccessCodeCollection(response.content, self.rest_client)
        }
        for code in self._models:
            if code.id in updated:
                code.set_source(updated[code.id].to_dict())
        return self
