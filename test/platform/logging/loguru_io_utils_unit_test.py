import pytest

from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import MAX_CONTENT_LENGTH
from src.platform.logging.loguru_io_utils import (
    mask_sensitive,
    should_mask_keyword,
    truncate_content,
)


@pytest.mark.unit
class TestSensitiveMasking:
    @pytest.mark.parametrize(
        ('raw', 'expected'),
        [
            ("password='hunter2'", "password='********'"),
            ("{'token': 'abc.def'}", "{'token': '********'}"),
            ('Authorization=Bearer', 'Authorization=********'),
        ],
    )
    def test_mask_fragments(self, raw: str, expected: str) -> None:
        assert mask_sensitive(raw) == expected

    def test_plain_values_untouched(self) -> None:
        assert mask_sensitive('ticketId=TKT-1') == 'ticketId=TKT-1'
        assert mask_sensitive(42) == 42

    def test_mask_by_keyword(self) -> None:
        assert should_mask_keyword('PASSWORD', 's3cret') == '********'
        assert should_mask_keyword('order_id', 'ord_77') == 'ord_77'

    def test_truncate_long_content(self) -> None:
        text = 'x' * (MAX_CONTENT_LENGTH + 5)

        assert truncate_content(text).endswith('...(+5 chars)')
        assert truncate_content('short') == 'short'


@pytest.mark.unit
class TestLoggerIO:
    @pytest.mark.asyncio
    async def test_async_function_result_and_errors_pass_through(self) -> None:
        @Logger.io
        async def double(value: int) -> int:
            if value < 0:
                raise ValueError('negative')
            return value * 2

        assert await double(4) == 8
        with pytest.raises(ValueError, match='negative'):
            await double(-1)

    def test_sync_function_result_passes_through(self) -> None:
        @Logger.io
        def greet(name: str) -> str:
            return f'hello {name}'

        assert greet('gate') == 'hello gate'
