import io
import json
import logging

import structlog
from rich.console import Console

from bomsync.core.logging import RichConsoleRenderer
from bomsync.core.logging import drop_style_processor
from bomsync.core.logging import setup_logging


def test_drop_style_processor():
    event = drop_style_processor(None, 'info', {'event': 'x', '_style': 'dim'})
    assert event == {'event': 'x'}


def test_rich_renderer_prints_one_line():
    buffer = io.StringIO()
    renderer = RichConsoleRenderer(Console(file=buffer, width=200, color_system=None))

    try:
        renderer(None, 'info', {
            'event': 'Repository sync finished', 'level': 'info',
            'logger': 'sync_service', 'repo': 'npm-local', '_style': 'dim',
        })
    except structlog.DropEvent:
        pass

    output = buffer.getvalue()
    assert 'Repository sync finished' in output
    assert "repo='npm-local'" in output
    assert 'sync_service' in output


def test_setup_logging_json():
    setup_logging('INFO', json_output=True)

    stream = io.StringIO()
    stdlib_logger = logging.getLogger('json_check')
    stdlib_logger.setLevel(logging.INFO)
    stdlib_logger.addHandler(logging.StreamHandler(stream))
    stdlib_logger.propagate = False

    structlog.get_logger('json_check').info('hello', repo='npm-local', _style='dim')

    payload = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert payload['event'] == 'hello'
    assert payload['repo'] == 'npm-local'
    assert '_style' not in payload
