import logging
import os
import sys
from typing import Any

import structlog
from rich.console import Console

console = Console(stderr=True)

LEVEL_STYLES = {
    'debug': 'dim',
    'info': 'green',
    'warning': 'yellow',
    'error': 'bold red',
    'critical': 'bold magenta',
}


class RichConsoleRenderer:
    """
    Renders structlog events as a single rich-styled line:
    timestamp, logger, level, event, then key=value context.
    An optional '_style' key overrides the style of the whole line.
    """

    def __init__(self, target: Console | None = None):
        self._console = target or console

    def __call__(self, logger, name, event_dict):
        custom_style = event_dict.pop('_style', None)

        event = event_dict.pop('event', '')
        log_level = event_dict.pop('level', 'info')
        logger_name = event_dict.pop('logger', None)
        timestamp = event_dict.pop('timestamp', '')
        exception = event_dict.pop('exception', None) or event_dict.pop('exc_info', None)
        stack_info = event_dict.pop('stack_info', None)

        level_style = LEVEL_STYLES.get(log_level, 'white')
        parts = []
        if timestamp:
            parts.append(f"[dim]{timestamp}[/dim]")
        if logger_name:
            parts.append(f"[bold]{logger_name}[/bold]")
        parts.append(f"[{level_style}]{log_level:<8}[/{level_style}]")
        parts.append(str(event))
        parts.extend(
            f"[cyan]{key}[/cyan]=[green]{value!r}[/green]"
            for key, value in event_dict.items()
        )

        message = ' '.join(parts)
        if exception:
            message += f"\n[red]{exception}[/red]"
        if stack_info:
            message += f"\n[dim]{stack_info}[/dim]"

        self._console.print(message, style=custom_style, highlight=False)

        # Already printed; keep the stdlib handler from emitting a second line.
        raise structlog.DropEvent


def drop_style_processor(logger, method_name, event_dict):
    """Strip the console-only '_style' hint from machine-readable output."""
    event_dict.pop('_style', None)
    return event_dict


def setup_logging(level: str = 'INFO', json_output: bool | None = None) -> None:
    """
    Configure structured logging for bomsync.

    JSON lines are emitted when ``json_output`` is true, or when it is left
    unset and ``ENV=production``. Otherwise events go to a rich console.
    """
    if json_output is None:
        json_output = os.getenv('ENV') == 'production'

    logging.basicConfig(format='%(message)s', stream=sys.stdout, level=level)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt='iso', utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors = shared_processors + [
            drop_style_processor,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            RichConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
