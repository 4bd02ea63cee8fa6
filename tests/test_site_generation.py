"""End-to-end tests running :class:`SiteGenerator` over the fixture export."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from doxysync.config import ProjectConfig, SiteConfig
from doxysync.exceptions import SchemaViolationError
from doxysync.generator import SiteGenerator

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def _config(xml_dir: Path, output_dir: Path, **overrides: object) -> SiteConfig:
    return SiteConfig(
        xml_dir=xml_dir,
        output_dir=output_dir,
        project=ProjectConfig(name="Widgets", footer_note="Fixture build"),
        **overrides,  # type: ignore[arg-type]
    )


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def _nav(output_dir: Path) -> list[object]:
    text = (output_dir / "nav.js").read_text(encoding="utf-8").strip()
    return msgspec_json.decode(text.removeprefix("var nav = ").removesuffix(";"))


@pytest.fixture
def site(xml_dir: Path, tmp_path: Path) -> tuple[Path, list[Path]]:
    output_dir = tmp_path / "public"
    written = SiteGenerator(_config(xml_dir, output_dir, workers=2)).run()
    return output_dir, written


def test_writes_pages_in_index_order(site: tuple[Path, list[Path]]) -> None:
    output_dir, written = site
    assert [path.name for path in written] == [
        "a_8h.html",
        "b_8h.html",
        "intro.html",
        "details.html",
        "nav.js",
        "index.html",
    ]
    assert not (output_dir / "empty_8h.html").exists()
    for asset in ("pygments.css", "site.css", "sidebar.js"):
        assert (output_dir / asset).is_file()


def test_file_page_renders_scopes_and_members(
    site: tuple[Path, list[Path]],
) -> None:
    output_dir, _ = site
    soup = _soup(output_dir / "a_8h.html")
    assert soup.title is not None
    assert soup.title.string == "a.h | Widgets Docs"
    assert soup.select_one("section#classns_1_1Widget") is not None
    assert soup.select_one("div.member#classns_1_1Widget_1aResize") is not None
    assert soup.select_one("tr#classns_1_1Widget_1aModeFast") is not None
    assert soup.select_one("#classns_1_1Widget_1aSecret") is None
    assert soup.select_one("#namespacens_1aHelper") is None
    footer = soup.select_one("p.footer-note")
    assert footer is not None
    assert footer.get_text() == "Fixture build"


def test_references_resolve_across_pages(site: tuple[Path, list[Path]]) -> None:
    output_dir, _ = site
    details = _soup(output_dir / "details.html")
    assert details.select_one('a[href="intro.html#intro_1overview"]') is not None

    intro = _soup(output_dir / "intro.html")
    assert intro.select_one('a[href="a_8h.html#classns_1_1Widget"]') is not None

    b_file = _soup(output_dir / "b_8h.html")
    assert b_file.select_one('a[href="a_8h.html#namespacens_1aMax"]') is not None


def test_dangling_reference_points_to_not_found(
    site: tuple[Path, list[Path]],
) -> None:
    output_dir, _ = site
    soup = _soup(output_dir / "a_8h.html")
    link = soup.select_one('a[href="#not-found"]')
    assert link is not None
    assert link.get_text() == "Gadget"
    html = "".join(
        path.read_text(encoding="utf-8") for path in output_dir.glob("*.html")
    )
    assert "refid://" not in html
    assert "doxyimg://" not in html


def test_images_are_copied_and_rewritten(
    site: tuple[Path, list[Path]], xml_dir: Path
) -> None:
    output_dir, _ = site
    assert (output_dir / "images" / "diagram.png").read_bytes() == (
        xml_dir / "diagram.png"
    ).read_bytes()
    image = _soup(output_dir / "intro.html").select_one("img")
    assert image is not None
    assert image.get("src") == "images/diagram.png"
    assert image.get("style") == "width: 50%"

    missing = _soup(output_dir / "details.html").select_one("img")
    assert missing is not None
    assert missing.get("src") == "missing.png"


def test_math_script_only_on_pages_with_formulas(
    site: tuple[Path, list[Path]],
) -> None:
    output_dir, _ = site
    assert _soup(output_dir / "intro.html").select_one("#MathJax-script")
    assert _soup(output_dir / "details.html").select_one("#MathJax-script") is None
    assert _soup(output_dir / "a_8h.html").select_one("#MathJax-script") is None


def test_nav_script_nests_child_pages(site: tuple[Path, list[Path]]) -> None:
    output_dir, _ = site
    assert _nav(output_dir) == [
        [["Intro", "intro.html"], [[["Details", "details.html"], []]]],
        [
            ["include", ""],
            [[["a.h", "a_8h.html"], []], [["b.h", "b_8h.html"], []]],
        ],
    ]


def test_landing_page_lists_pages_and_files(site: tuple[Path, list[Path]]) -> None:
    output_dir, _ = site
    soup = _soup(output_dir / "index.html")
    pages = [a.get("href") for a in soup.select(".landing-pages a")]
    files = [a.get("href") for a in soup.select(".landing-files a")]
    assert pages == ["details.html", "intro.html"]
    assert files == ["a_8h.html", "b_8h.html"]


def test_output_is_deterministic(xml_dir: Path, tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    SiteGenerator(_config(xml_dir, first, workers=1)).run()
    SiteGenerator(_config(xml_dir, second, workers=4)).run()
    for name in ("a_8h.html", "b_8h.html", "intro.html", "details.html"):
        assert str(_soup(first / name).main) == str(_soup(second / name).main)
    assert (first / "nav.js").read_bytes() == (second / "nav.js").read_bytes()


def test_recoverable_problems_are_warnings(
    xml_dir: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="doxysync"):
        SiteGenerator(_config(xml_dir, tmp_path / "out")).run()
    messages = [record.getMessage() for record in caplog.records]
    assert any("classns_1_1Gadget" in message for message in messages)
    assert any("missing.png" in message for message in messages)


def test_output_dir_override(xml_dir: Path, tmp_path: Path) -> None:
    config = _config(xml_dir, tmp_path / "configured")
    generator = SiteGenerator(config, output_dir=tmp_path / "override")
    generator.run()
    assert (tmp_path / "override" / "index.html").is_file()
    assert not (tmp_path / "configured").exists()
    assert config.output_dir == tmp_path / "configured"


def test_include_patterns_limit_files(xml_dir: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "out"
    SiteGenerator(_config(xml_dir, output_dir, include=["b.h"])).run()
    assert (output_dir / "b_8h.html").is_file()
    assert not (output_dir / "a_8h.html").exists()
    assert (output_dir / "intro.html").is_file()


def test_schema_violation_aborts_run(
    export_documents: dict[str, str],
    make_export: cabc.Callable[[dict[str, str]], Path],
    tmp_path: Path,
) -> None:
    export_documents["details.xml"] = "<doxygen><compounddef"
    xml_dir = make_export(export_documents)
    with pytest.raises(SchemaViolationError):
        SiteGenerator(_config(xml_dir, tmp_path / "out")).run()


def test_reference_to_anchor_in_class_description(
    export_documents: dict[str, str],
    make_export: cabc.Callable[[dict[str, str]], Path],
    tmp_path: Path,
) -> None:
    export_documents["classns_1_1Widget.xml"] = export_documents[
        "classns_1_1Widget.xml"
    ].replace(
        "<para>A resizable widget.</para>",
        '<para>A resizable widget.<anchor id="classns_1_1Widget_1usage"/></para>',
    )
    export_documents["details.xml"] = export_documents["details.xml"].replace(
        "<para>Back to",
        '<para>See <ref refid="classns_1_1Widget_1usage" kindref="member">'
        "usage</ref>.</para>\n      <para>Back to",
    )
    output_dir = tmp_path / "out"
    SiteGenerator(_config(make_export(export_documents), output_dir)).run()

    details = _soup(output_dir / "details.html")
    link = details.select_one('a[href="a_8h.html#classns_1_1Widget_1usage"]')
    assert link is not None
    assert link.get_text() == "usage"
    assert _soup(output_dir / "a_8h.html").select_one("#classns_1_1Widget_1usage")
