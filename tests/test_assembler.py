"""Tests for the document assembler."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest
from conftest import book

from usfm2doc.assembler import assemble
from usfm2doc.exceptions import (
    ConversionCancelledError,
    EmptyInputError,
    InputFileError,
    ParseError,
)
from usfm2doc.schemas import MarkerKind
from usfm2doc.usfm_parser import parse_usfm


class TestAssembleOrder:
    """Tests for merge order and source tracking."""

    @pytest.mark.asyncio
    async def test_preserves_file_order(self, write_usfm, genesis_usfm, exodus_usfm) -> None:
        """Markers from file i precede markers from file i+1."""
        exodus = write_usfm("02-EXO.usfm", exodus_usfm)
        genesis = write_usfm("01-GEN.usfm", genesis_usfm)

        document = await assemble([exodus, genesis])

        assert [marker.text for marker in document.books()] == ["Exodus", "Genesis"]

    @pytest.mark.asyncio
    async def test_records_source_slices(self, write_usfm, genesis_usfm, exodus_usfm) -> None:
        genesis = write_usfm("GEN.usfm", genesis_usfm)
        exodus = write_usfm("EXO.usfm", exodus_usfm)

        document = await assemble([genesis, exodus])

        assert [source.path for source in document.sources] == [genesis, exodus]
        assert [(s.start, s.stop) for s in document.sources] == [(0, 1), (1, 2)]
        assert document.markers_from(document.sources[1])[0].text == "Exodus"

    @pytest.mark.asyncio
    async def test_accepts_string_paths(self, write_usfm, genesis_usfm) -> None:
        path = write_usfm("GEN.usfm", genesis_usfm)
        document = await assemble([str(path)])
        assert document.markers[0].kind == MarkerKind.BOOK

    @pytest.mark.asyncio
    async def test_uses_injected_parser(self, write_usfm) -> None:
        """Any callable returning markers can stand in for the USFM parser."""
        path = write_usfm("custom.txt", "ignored")
        document = await assemble([path], parser=lambda text: [book("Custom")])
        assert document.title == "Custom"

    @pytest.mark.asyncio
    async def test_duplicate_books_are_kept_with_warning(
        self, write_usfm, genesis_usfm, caplog: pytest.LogCaptureFixture
    ) -> None:
        first = write_usfm("a.usfm", genesis_usfm)
        second = write_usfm("b.usfm", genesis_usfm)

        with caplog.at_level(logging.WARNING, logger="usfm2doc.assembler"):
            document = await assemble([first, second])

        assert len(document.books()) == 2
        assert "appears in both" in caplog.text


class TestAssembleFailures:
    """Tests for inputs that abort assembly."""

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        with pytest.raises(EmptyInputError):
            await assemble([])

    @pytest.mark.asyncio
    async def test_missing_file_names_path(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.usfm"
        with pytest.raises(InputFileError) as exc_info:
            await assemble([missing])
        assert exc_info.value.path == missing

    @pytest.mark.asyncio
    async def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.usfm"
        path.write_bytes(b"\\id GEN\n\xff\xfe\xfa")
        with pytest.raises(InputFileError):
            await assemble([path])

    @pytest.mark.asyncio
    async def test_parse_error_carries_path(self, write_usfm, genesis_usfm) -> None:
        """The failing file is named even though earlier files parsed fine."""
        good = write_usfm("good.usfm", genesis_usfm)
        bad = write_usfm("bad.usfm", "\\id GEN\n\\c\n")

        with pytest.raises(ParseError) as exc_info:
            await assemble([good, bad])

        assert exc_info.value.path == bad
        assert exc_info.value.line == 2

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self, write_usfm, genesis_usfm, tmp_path) -> None:
        """Files after a failing one are never parsed."""
        calls: list[str] = []

        def parser(text: str):
            calls.append(text)
            return parse_usfm(text)

        good = write_usfm("good.usfm", genesis_usfm)
        with pytest.raises(InputFileError):
            await assemble([good, tmp_path / "missing.usfm", good], parser=parser)

        assert len(calls) == 1


class TestProgressAndCancellation:
    """Tests for the progress callback and cancellation hook."""

    @pytest.mark.asyncio
    async def test_progress_reports_completed_fraction(
        self, write_usfm, genesis_usfm, exodus_usfm
    ) -> None:
        """Two files report 0 then 50; 100 is never reported."""
        files = [write_usfm("a.usfm", genesis_usfm), write_usfm("b.usfm", exodus_usfm)]
        seen: list[float] = []

        await assemble(files, progress_callback=seen.append)

        assert seen == [0.0, 50.0]

    @pytest.mark.asyncio
    async def test_single_file_progress(self, write_usfm, genesis_usfm) -> None:
        seen: list[float] = []
        await assemble([write_usfm("a.usfm", genesis_usfm)], progress_callback=seen.append)
        assert seen == [0.0]

    @pytest.mark.asyncio
    async def test_cancel_before_start(self, write_usfm, genesis_usfm) -> None:
        event = asyncio.Event()
        event.set()
        with pytest.raises(ConversionCancelledError):
            await assemble([write_usfm("a.usfm", genesis_usfm)], cancel_event=event)

    @pytest.mark.asyncio
    async def test_cancel_between_files(self, write_usfm, genesis_usfm, exodus_usfm) -> None:
        """Setting the event from the progress callback stops the next file."""
        event = asyncio.Event()
        files = [write_usfm("a.usfm", genesis_usfm), write_usfm("b.usfm", exodus_usfm)]
        seen: list[float] = []

        def on_progress(percent: float) -> None:
            seen.append(percent)
            event.set()

        with pytest.raises(ConversionCancelledError):
            await assemble(files, progress_callback=on_progress, cancel_event=event)

        assert seen == [0.0]


class TestParserFailures:
    """Tests for failures raised by an injected parser."""

    @pytest.mark.asyncio
    async def test_unexpected_parser_error_names_file(self, write_usfm) -> None:
        """Any parser exception surfaces as a ParseError carrying the path."""
        path = write_usfm("odd.usfm", "\\id GEN")

        def parser(text: str):
            raise ValueError("bad token")

        with pytest.raises(ParseError, match="bad token") as exc_info:
            await assemble([path], parser=parser)

        assert exc_info.value.path == path
        assert isinstance(exc_info.value.__cause__, ValueError)
