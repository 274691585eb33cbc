"""Embed code for the NextEvent booking widget"""

import html
from typing import Any
from urllib.parse import quote, quote_plus, urlencode

from nextevent.core.config import Env
from nextevent.models.order import Basket

# Parameters passed to the widget iframe as is
IFRAME_PARAMS = ("width", "margin", "focus")


class Widget:
    """Booking widget of an application

    Args:
        app_url: Application URL, e.g. https://myapp.nextevent.com
        widget_hash: Hash identifying the widget
    """

    def __init__(self, app_url: str, widget_hash: str) -> None:
        self.app_url = app_url.rstrip("/")
        self.widget_hash = widget_hash

    def generate_embed_code(self, params: Any = None) -> str:
        """Return the script tag embedding the widget

        Args:
            params: Event id, or a dict with `event_id`, `basket`, `width`,
                `margin`, `focus` and further widget parameters
        """
        if params is not None and not isinstance(params, dict):
            params = {"event_id": params}
        src = self.generate_embed_src(params or {})
        return (
            '<script class="nextevent" type="text/javascript" '
            f'src="{html.escape(src)}"></script>'
        )

    def generate_embed_src(self, params: dict[str, Any]) -> str:
        params = dict(params)
        scheme, sep, rest = self.app_url.partition("://")
        src = f"{scheme}{sep}widget-{self.widget_hash}-{rest}/widget/embed/"

        path: list[str] = []
        query: list[str] = []
        iframe: dict[str, str] = {}

        locale = Env.get_var("locale")
        if locale:
            path.append(locale[:2])

        event_id = params.pop("event_id", None)
        if event_id is not None:
            path.append(f"event/{event_id}")

        basket = params.pop("basket", None)
        if basket is not None:
            if isinstance(basket, Basket):
                basket = basket.widget_parameter
            query.append(f"basket~{basket}")

        if isinstance(params.get("focus"), bool):
            params["focus"] = "true" if params["focus"] else "false"
        for key in IFRAME_PARAMS:
            value = params.pop(key, None)
            if value is not None:
                iframe[key] = str(value)

        for key, value in params.items():
            if value:
                query.append(f"{quote_plus(str(key))}~{quote_plus(str(value))}")

        if path or query or iframe:
            src += "#src=/" + "/".join(path)
            if query:
                iframe["query"] = ";".join(query)
            if iframe:
                src += "&" + urlencode(iframe, quote_via=quote)
        return src
