import logging
from contextlib import contextmanager

from django.conf import settings
from django.db import transaction

logger = logging.getLogger(__name__)


@contextmanager
def atomic_scope(using=None, timeout_ms=None):
    """
    One unit of work: commit when the block exits normally,
    roll back on every exception (including statement timeouts).

    On PostgreSQL each statement inside the scope is bounded by
    ERP_STATEMENT_TIMEOUT_MS; SET LOCAL dies with the transaction.
    """
    if timeout_ms is None:
        timeout_ms = getattr(settings, "ERP_STATEMENT_TIMEOUT_MS", 0)

    with transaction.atomic(using=using):
        connection = transaction.get_connection(using)
        # Only the outermost scope sets the bound; nested scopes are savepoints
        if timeout_ms and connection.vendor == "postgresql" and len(
                connection.savepoint_ids) == 0:
            with connection.cursor() as cursor:
                cursor.execute(
                    "SET LOCAL statement_timeout = %d" % int(timeout_ms))
            logger.debug("statement_timeout set to %sms", timeout_ms)
        yield connection
