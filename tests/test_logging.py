import logging

from echo_service.observability.logging import configure_logging


def test_configure_logging_is_idempotent_and_updates_level() -> None:
    configure_logging(logging.INFO)
    handlers = list(logging.getLogger().handlers)

    configure_logging(logging.ERROR)
    root = logging.getLogger()
    assert root.handlers == handlers
    assert root.level == logging.ERROR

    configure_logging(logging.WARNING)
    assert root.level == logging.WARNING
