from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from models.stubs import Stub, StubTable
from providers.service import LanguageService
from settings.config import BblsConfig

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def _boom(*args: object, **kwargs: object) -> None:
    raise RuntimeError("provider exploded")


def test_queries_share_one_extraction_pass() -> None:
    service = LanguageService()
    text = "Global score\nPrint score\n"

    hover = service.hover("main.bb", text, 1, 7)
    locations = service.definition("main.bb", text, 1, 7)

    assert hover is not None
    assert locations[0].position.line == 0
    assert service.cache is not None
    assert service.cache.stats.hits >= 1


def test_providers_never_raise(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    service = LanguageService()
    for name in (
        "hover",
        "definition",
        "complete",
        "signature_help",
        "semantic_tokens",
        "document_outline",
    ):
        monkeypatch.setattr(f"providers.service.{name}", _boom)

    with caplog.at_level(logging.ERROR, logger="providers.service"):
        assert service.hover("main.bb", "x", 0, 0) is None
        assert service.definition("main.bb", "x", 0, 0) == []
        assert service.complete("main.bb", "x", 0, 0) == []
        assert service.signature_help("main.bb", "x", 0, 0) is None
        assert service.semantic_tokens("main.bb", "x") == []
        assert service.outline("main.bb", "x") == []

    assert "Hover failed for main.bb:0:0" in caplog.text
    assert "provider exploded" in caplog.text


def test_for_workspace_reads_configuration(tmp_path: Path) -> None:
    (tmp_path / "bbls.toml").write_text(
        'use_brackets_everywhere = true\ntodo_tags = ["NOTE"]\n', encoding="utf-8"
    )

    service = LanguageService.for_workspace(tmp_path)
    items = {item.label: item for item in service.complete("main.bb", "\n", 0, 0)}

    assert items["Cls"].insert_text == "Cls()"
    assert [item.tag for item in service.todos("; NOTE check\n; TODO skip\n")] == ["NOTE"]
    assert service.workspace_roots == (str(tmp_path),)


def test_for_workspace_resolves_userlibs_relative_to_root(tmp_path: Path) -> None:
    (tmp_path / "libs").mkdir()
    (tmp_path / "libs" / "extra.decls").write_text("ExtraCall(a)\n", encoding="utf-8")
    (tmp_path / "bbls.toml").write_text('userlibs_dir = "libs"\n', encoding="utf-8")

    service = LanguageService.for_workspace(tmp_path)

    assert "ExtraCall" in service.stubs
    result = service.signature_help("main.bb", "ExtraCall(", 0, 10)
    assert result is not None
    assert result.signatures[0].label == "ExtraCall(a)"


def test_uncached_service_extracts_every_time() -> None:
    service = LanguageService(use_cache=False)

    assert service.cache is None
    assert service.symbols("main.bb", "Global a\n") is not service.symbols(
        "main.bb", "Global a\n"
    )


def test_explicit_stub_table_is_used() -> None:
    stubs = StubTable([Stub(name="Custom", declaration="Function Custom(x)")])
    service = LanguageService(BblsConfig(), stubs=stubs)

    hover = service.hover("main.bb", "Custom 1\n", 0, 1)

    assert hover is not None
    assert "Function Custom(x)" in hover.contents
    assert service.hover("main.bb", "Cls\n", 0, 1) is None
