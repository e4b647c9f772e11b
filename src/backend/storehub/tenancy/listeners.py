from pymongo import monitoring

from storehub.utils.logger import get_logger

logger = get_logger(__name__)


class TenantConnectionListener(monitoring.ServerListener, monitoring.ServerHeartbeatListener):
    """
    Follows server monitoring events for one tenant client and keeps the connection state
    in step. Runs on pymongo's monitor threads, so every callback swallows its own errors.
    """

    def __init__(self, connection):
        self.connection = connection

    def opened(self, event):
        self._safely(self._on_opened, event)

    def description_changed(self, event):
        self._safely(self._on_description_changed, event)

    def closed(self, event):
        self._safely(self._on_closed, event)

    def started(self, event):
        pass

    def succeeded(self, event):
        pass

    def failed(self, event):
        self._safely(self._on_heartbeat_failed, event)

    def _on_opened(self, event):
        logger.info(f"Tenant DB server opened for {self.connection.tenant_id}: {event.server_address}")

    def _on_description_changed(self, event):
        was_known = event.previous_description.is_server_type_known
        is_known = event.new_description.is_server_type_known
        if is_known and not was_known:
            self.connection.mark_ready()
            logger.info(f"Tenant DB connected: {self.connection.tenant_id}")
        elif was_known and not is_known:
            self.connection.mark_errored()
            logger.warning(f"Tenant DB disconnected: {self.connection.tenant_id} ({event.server_address})")

    def _on_closed(self, event):
        logger.info(f"Tenant DB server closed for {self.connection.tenant_id}: {event.server_address}")

    def _on_heartbeat_failed(self, event):
        self.connection.mark_errored()
        logger.warning(f"Tenant DB error for {self.connection.tenant_id}: {event.reply}")

    def _safely(self, handler, event):
        try:
            handler(event)
        except Exception:
            logger.error(f"Tenant DB listener failed for {self.connection.tenant_id}", exc_info=True)
