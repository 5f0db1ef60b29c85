# -*- coding: utf-8 -*-
"""Unit tests for the command-line entry point."""

from __future__ import annotations

import pytest

from rare_sniper.main import main, parse_args


def test_parse_args_reads_symbol_and_flag() -> None:
    args = parse_args(["mkrs", "--clear-cache"])

    assert args.symbol == "mkrs"
    assert args.clear_cache is True


def test_main_without_symbol_prints_usage_and_exits_1(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "Usage: rare-sniper <collection-symbol>" in err
    assert "Example: rare-sniper mkrs" in err
