"""
Logging of the operator, both as plain texts and as JSON records.

The messages about the connector's deployment are logged via
:class:`ObjectLogger`, which puts the deployment's reference into the records
as ``k8s_ref``. The formatters render that reference as a ``[namespace/name]``
prefix of the message (the default for texts), or as a separate field
of the JSON records (always), or both.
"""
import copy
import enum
import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple

from pythonjsonlogger import core as jsonlogger_core
from pythonjsonlogger import json as jsonlogger

DEFAULT_JSON_REFKEY = 'object'
""" A key for object references in JSON logs, as seen by the log parsers. """

SEVERITIES = [
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
]


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = '-json-'


def _prefixed(record: logging.LogRecord) -> logging.LogRecord:
    ref = getattr(record, 'k8s_ref', None)
    if not ref:
        return record
    namespace, name = ref.get('namespace'), ref.get('name')
    record = copy.copy(record)  # shallow; other handlers must see the original.
    record.msg = f"[{namespace}/{name}] {record.msg}" if namespace else f"[{name}] {record.msg}"
    return record


class ObjectFormatter(logging.Formatter):
    """ A formatter that can prefix the messages with the object's namespace & name. """

    def __init__(self, *args: Any, prefixing: bool = False, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.prefixing = prefixing

    def format(self, record: logging.LogRecord) -> str:
        return super().format(_prefixed(record) if self.prefixing else record)


class ObjectTextFormatter(ObjectFormatter):
    pass


class ObjectJsonFormatter(ObjectFormatter, jsonlogger.JsonFormatter):
    """ A JSON formatter with the object's reference & the record's severity as fields. """

    def __init__(self, *args: Any, refkey: Optional[str] = None, **kwargs: Any) -> None:
        kwargs.setdefault('reserved_attrs', set(jsonlogger_core.RESERVED_ATTRS) | {'k8s_ref'})
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self.refkey = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: Dict[str, Any],
            record: logging.LogRecord,
            message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        ref = getattr(record, 'k8s_ref', None)
        if ref is not None:
            log_record[self.refkey] = ref
        severity = next((name for level, name in SEVERITIES if record.levelno <= level), 'fatal')
        log_record.setdefault('severity', severity)


class ObjectLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """
    A logger for the messages about one object, which may not exist yet.

    The reference has the same structure as an object reference in K8s API.
    """

    def __init__(
            self,
            *,
            namespace: Optional[str],
            name: Optional[str],
            kind: Optional[str] = None,
            api_version: Optional[str] = None,
    ) -> None:
        ref = {'apiVersion': api_version, 'kind': kind, 'name': name, 'namespace': namespace}
        super().__init__(logger, {'k8s_ref': ref})

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # The message's own extras are kept; the standard adapter would replace them.
        kwargs['extra'] = {**(self.extra or {}), **kwargs.get('extra', {})}
        return msg, kwargs


logger = logging.getLogger('tunnelkeeper.objects')


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: LogFormat = LogFormat.FULL,
        log_prefix: Optional[bool] = None,
        log_refkey: Optional[str] = None,
) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(make_formatter(log_format=log_format,
                                        log_prefix=log_prefix,
                                        log_refkey=log_refkey))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug or verbose else logging.WARNING if quiet else logging.INFO)

    # The event loop's own chatter is of interest only when debugging.
    asyncio_logger = logging.getLogger('asyncio')
    asyncio_logger.propagate = bool(debug)
    if not debug:
        asyncio_logger.handlers[:] = [logging.NullHandler()]


def make_formatter(
        log_format: LogFormat = LogFormat.FULL,
        log_prefix: Optional[bool] = None,
        log_refkey: Optional[str] = None,
) -> ObjectFormatter:
    if not isinstance(log_format, LogFormat):
        raise ValueError(f"Unsupported log format: {log_format!r}")
    prefixing = log_prefix if log_prefix is not None else log_format is not LogFormat.JSON
    if log_format is LogFormat.JSON:
        return ObjectJsonFormatter(refkey=log_refkey, prefixing=prefixing)
    return ObjectTextFormatter(log_format.value, prefixing=prefixing)
