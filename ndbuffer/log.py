import datetime as dt
import json
import logging
import logging.config
import pathlib
from typing import Optional, Union


def setup_logging(config_file: Optional[Union[str, pathlib.Path]] = None) -> None:
    """
    Configures logging
    If an explicit config file is given it is used; otherwise a
    'logging_config.json' in the working directory is loaded if present,
    and the packaged ndbuffer default if not
    """
    if config_file is not None:
        config_path = pathlib.Path(config_file)
    else:
        config_path = pathlib.Path("logging_config.json")
        if not config_path.is_file():
            config_path = pathlib.Path(__file__).parent.resolve() / "logging_config.json"
    with open(config_path) as f_in:
        config = json.load(f_in)
    logging.config.dictConfig(config)


class NDBufferJSONFormatter(logging.Formatter):
    """
    JSON-lines formatter, for user logging configs:
    {"()": "ndbuffer.log.NDBufferJSONFormatter", "fmt_keys": {...}}
    Attributes:
        fmt_keys (dict): output key -> LogRecord attribute to log under it

    Methods:
        format: Formats the record into a JSON string
        _prepare_log_dict: Prepares the actual log dict
    """

    def __init__(
        self,
        *,
        fmt_keys: Optional[dict] = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}

    def format(self, record: logging.LogRecord) -> str:
        message = self._prepare_log_dict(record)
        return json.dumps(message, default=str)

    def _prepare_log_dict(self, record: logging.LogRecord) -> dict:
        always_fields = {
            "message": record.getMessage(),
            "timestamp": dt.datetime.fromtimestamp(
                record.created, tz=dt.timezone.utc
            ).isoformat(),
        }

        if record.exc_info is not None:
            always_fields["exc_info"] = self.formatException(record.exc_info)

        if record.stack_info is not None:
            always_fields["stack_info"] = self.formatStack(record.stack_info)

        message = {
            key: msg_val
            if (msg_val := always_fields.pop(val, None)) is not None
            else getattr(record, val)
            for key, val in self.fmt_keys.items()
        }
        message.update(always_fields)
        return message
