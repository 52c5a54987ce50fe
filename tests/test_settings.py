import logging

from shop_api import settings


def test_console_handler_uses_a_defined_formatter():
    formatter = settings.LOGGING["handlers"]["console"]["formatter"]
    assert formatter in settings.LOGGING["formatters"]


def test_verbose_format_can_be_selected(monkeypatch):
    monkeypatch.setitem(settings.LOGGING["handlers"]["console"], "formatter", "verbose")
    settings.configure_logging()

    handler = logging.getLogger("shop_api").handlers[0]
    assert "{process:d}" in handler.formatter._fmt

    monkeypatch.undo()
    settings.configure_logging()
