"""Tests for spine_command.command.output."""

from dataclasses import dataclass

import pytest

from spine_command.command.output import OutputWriter, WrittenFile, render_output
from spine_command.command.resolver import RunLocation
from spine_command.core.errors import InvalidArtifactNameError


@pytest.fixture
def location(tmp_path):
    return RunLocation(directory=tmp_path, timestamp="20260115.103045", input_hash="abc")


class TestRenderOutput:
    def test_string_verbatim(self):
        assert render_output("Hello, World!") == "Hello, World!"

    def test_empty_string_verbatim(self):
        assert render_output("") == ""

    def test_none_is_undefined(self):
        assert render_output(None) == "undefined"

    def test_structured_pretty(self):
        assert render_output({"doubled": 42}) == '{\n  "doubled": 42\n}'

    def test_dataclass(self):
        @dataclass
        class Result:
            total: int

        assert render_output(Result(total=3)) == '{\n  "total": 3\n}'

    def test_unserializable_raises(self):
        with pytest.raises(TypeError):
            render_output({"handle": object()})


class TestOutputWriter:
    @pytest.mark.asyncio
    async def test_write_text(self, location):
        writer = OutputWriter(location)
        result = await writer.write(name="notes.txt", data="hello")
        assert isinstance(result, WrittenFile)
        assert result.path == location.artifact_path("notes.txt")
        assert result.path.read_text() == "hello"

    @pytest.mark.asyncio
    async def test_write_bytes(self, location):
        writer = OutputWriter(location)
        result = await writer.write(name="blob.bin", data=b"\x00\x01\xff")
        assert result.path.read_bytes() == b"\x00\x01\xff"

    @pytest.mark.asyncio
    async def test_nested_name_creates_directories(self, location):
        writer = OutputWriter(location)
        result = await writer.write(name="reports/analytics/data.json", data='{"rows": 3}')
        assert result.path.read_text() == '{"rows": 3}'
        assert result.path.parent.is_dir()

    @pytest.mark.asyncio
    async def test_last_write_wins(self, location):
        writer = OutputWriter(location)
        await writer.write(name="state.txt", data="first, and longer")
        result = await writer.write(name="state.txt", data="second")
        assert result.path.read_text() == "second"
        assert writer.written == [result.path, result.path]

    @pytest.mark.asyncio
    async def test_invalid_name(self, location):
        with pytest.raises(InvalidArtifactNameError):
            await OutputWriter(location).write(name="../outside.txt", data="x")

    @pytest.mark.asyncio
    async def test_write_primary(self, location):
        result = await OutputWriter(location).write_primary({"doubled": 42})
        assert result.path == location.output_path
        assert result.path.read_text() == '{\n  "doubled": 42\n}'
