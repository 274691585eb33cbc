"""Event models (schema.org JSON-LD shaped)"""

from datetime import datetime
from typing import Any

from .base import Model


class Event(Model):
    """Event returned by the /jsonld/event endpoints"""

    def is_valid(self) -> bool:
        # name and description may be empty
        return (
            self._has("identifier", "state")
            and "name" in self._source
            and "description" in self._source
        )

    @property
    def id(self) -> str:
        return str(self._source["identifier"])

    @property
    def state(self) -> str:
        return self._source["state"]

    @property
    def title(self) -> str | None:
        return self._source["name"]

    @property
    def description(self) -> str | None:
        return self._source["description"]

    @property
    def location(self) -> "Location | None":
        if self._source.get("location"):
            return Location(self._source["location"])
        return None

    @property
    def start_date(self) -> datetime | None:
        return self._date("startDate")

    @property
    def end_date(self) -> datetime | None:
        return self._date("endDate")


class Location(Model):
    def is_valid(self) -> bool:
        return self._has("name")

    @property
    def title(self) -> str:
        return self._source["name"]

    @property
    def address(self) -> "PostalAddress | None":
        if self._source.get("address") is not None:
            return PostalAddress(self._source["address"])
        return None

    @property
    def geo_location(self) -> "GeoCoordinates | None":
        if self._source.get("geo") is not None:
            return GeoCoordinates(self._source["geo"])
        return None


class PostalAddress(Model):
    """Postal address, every field may be missing"""

    def is_valid(self) -> bool:
        return True

    @property
    def country(self) -> str:
        return self._source.get("addressCountry") or ""

    @property
    def locality(self) -> str:
        return self._source.get("addressLocality") or ""

    @property
    def postal_code(self) -> str:
        return self._source.get("postalCode") or ""

    @property
    def street_address(self) -> str:
        return self._source.get("streetAddress") or ""


class GeoCoordinates(Model):
    def is_valid(self) -> bool:
        return self._has("latitude", "longitude")

    @property
    def latitude(self) -> float:
        return self._source["latitude"]

    @property
    def longitude(self) -> float:
        return self._source["longitude"]


class Organization(Model):
    """Organizer of an event, requires a name or company"""

    def is_valid(self) -> bool:
        return self._has("name") or self._has("company")

    @property
    def name(self) -> str:
        return self._source.get("name") or self._source.get("company") or ""

    @property
    def address(self) -> PostalAddress | None:
        if self._source.get("address") is not None:
            return PostalAddress(self._source["address"])
        return None

    @property
    def email(self) -> str | None:
        return self._source.get("email")

    @property
    def phone(self) -> str | None:
        return self._source.get("telephone")

    @property
    def url(self) -> Any:
        return self._source.get("url")
