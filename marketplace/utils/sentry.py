"""
Опциональная интеграция Sentry для error tracking
"""

import logging
import os


logger = logging.getLogger(__name__)


def init_sentry() -> str | None:
    """
    Инициализация Sentry для error tracking (опционально)

    Returns:
        Sentry DSN если успешно, None если Sentry не настроен
    """
    sentry_dsn = os.getenv("SENTRY_DSN")
    environment = os.getenv("ENVIRONMENT", "development")

    if not sentry_dsn:
        logger.info("Sentry DSN не настроен, error tracking отключен")
        return None

    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration
    except ImportError:
        logger.warning(
            "Sentry SDK не установлен. "
            "Установите: pip install sentry-sdk или pip install -e .[monitoring]"
        )
        return None

    logging_integration = LoggingIntegration(
        level=logging.INFO,  # breadcrumbs
        event_level=logging.ERROR,  # события
    )

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=environment,
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
        integrations=[logging_integration],
        send_default_pii=False,  # ID пользователей не отправляем
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )

    logger.info(f"Sentry инициализирован (environment: {environment})")
    return sentry_dsn
