"""
Logging configuration for skyfs.

Provides structured JSON logging for registry activity and security events.
Never pass seeds, private keys, symmetric keys or plaintext to a logger;
public keys, tweaks, revisions and lengths are safe.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

# Context variable correlating the log lines of one storage operation
operation_id_var: ContextVar[str] = ContextVar('operation_id', default='')

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One object per line. Audit events add their fields at the top level;
    fields whose value is None are left out.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        operation_id = operation_id_var.get()
        if operation_id:
            entry["operation_id"] = operation_id

        fields = getattr(record, 'extra_fields', None)
        if fields:
            entry.update({k: v for k, v in fields.items() if v is not None})
        else:
            entry["location"] = f"{record.module}.{record.funcName}:{record.lineno}"

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry)


class AuditLogger:
    """
    Logger for registry and security events.

    Each event is emitted as a single record whose `extra_fields` carry the
    event type, the current operation id and the event's own fields.
    """

    def __init__(self, name: str = "skyfs.audit"):
        self._logger = logging.getLogger(name)

    def _event(self, level: int, event_type: str, summary: str, **fields) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields["event_type"] = event_type
        fields["operation_id"] = operation_id_var.get() or None
        self._logger.log(level, "%s: %s", event_type, summary, extra={"extra_fields": fields})

    def registry_lookup(
        self,
        public_key: str,
        data_key: str,
        found: bool,
        revision: Optional[int] = None
    ) -> None:
        self._event(
            logging.DEBUG,
            "REGISTRY_LOOKUP",
            f"Registry lookup {'hit' if found else 'miss'} for {data_key}",
            public_key=public_key,
            data_key=data_key,
            found=found,
            revision=revision,
        )

    def registry_update(self, public_key: str, data_key: str, revision: int) -> None:
        """Log a published registry entry."""
        self._event(
            logging.INFO,
            "REGISTRY_UPDATE",
            f"Published revision {revision} for {data_key}",
            public_key=public_key,
            data_key=data_key,
            revision=revision,
        )

    def signature_rejected(self, public_key: str, data_key: str, revision: int) -> None:
        """Log a registry entry whose signature did not verify against its owner."""
        self._event(
            logging.ERROR,
            "SIGNATURE_REJECTED",
            f"Could not verify signature of revision {revision} for {data_key}",
            public_key=public_key,
            data_key=data_key,
            revision=revision,
        )

    def decryption_failed(self, data_key: str, length: int) -> None:
        self._event(
            logging.WARNING,
            "DECRYPTION_FAILED",
            f"Could not decrypt {length}-byte container for {data_key}",
            data_key=data_key,
            length=length,
        )


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    # stderr keeps stdout free for command output
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit StructuredFormatter JSON lines instead of text
        log_file: Optional file that receives a copy of every line
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = StructuredFormatter() if json_format else logging.Formatter(TEXT_FORMAT)
    for handler in _build_handlers(log_file):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def set_operation_id(operation_id: Optional[str] = None) -> str:
    """
    Set the operation ID for the current context.

    Args:
        operation_id: ID to set, or None to generate one

    Returns:
        The operation ID that was set
    """
    if operation_id is None:
        operation_id = str(uuid.uuid4())
    operation_id_var.set(operation_id)
    return operation_id


def get_operation_id() -> str:
    return operation_id_var.get()


# Global audit logger instance
audit_log = AuditLogger()
