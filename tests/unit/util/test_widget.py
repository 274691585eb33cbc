"""Tests for the booking widget embed code"""

import pytest

from nextevent.core.config import Env
from nextevent.models import Basket
from nextevent.util import Widget

EMBED_BASE = "https://widget-w1-app1.nextevent.test/widget/embed/"


@pytest.fixture
def widget() -> Widget:
    return Widget("https://app1.nextevent.test/", "w1")


@pytest.mark.unit
class TestWidget:
    def test_plain_src(self, widget):
        assert widget.generate_embed_src({}) == EMBED_BASE

    def test_event_id(self, widget):
        src = widget.generate_embed_src({"event_id": 1})

        assert src == f"{EMBED_BASE}#src=/event/1"

    def test_locale_prefix(self, widget):
        Env.set_var("locale", "de_CH")

        assert widget.generate_embed_src({"event_id": 1}) == (
            f"{EMBED_BASE}#src=/de/event/1"
        )

    def test_iframe_and_query_parameters(self, widget):
        src = widget.generate_embed_src(
            {
                "event_id": 1,
                "basket": 42,
                "width": 600,
                "focus": False,
                "discount": "SUMMER",
                "empty": "",
            }
        )

        assert src == (
            f"{EMBED_BASE}#src=/event/1"
            "&width=600&focus=false&query=basket~42%3Bdiscount~SUMMER"
        )

    def test_basket_model(self, widget, fixture_loader):
        src = widget.generate_embed_src({"basket": Basket(fixture_loader("basket"))})

        assert src == f"{EMBED_BASE}#src=/&query=basket~42"

    def test_embed_code_escapes_src(self, widget):
        code = widget.generate_embed_code({"event_id": 1, "margin": 10})

        assert code == (
            '<script class="nextevent" type="text/javascript" '
            f'src="{EMBED_BASE}#src=/event/1&amp;margin=10"></script>'
        )

    def test_embed_code_for_event_id(self, widget):
        assert "#src=/event/7" in widget.generate_embed_code(7)
